"""
velada/utils/content_validation.py
Display-name cleaning and profanity filtering

User names arrive from the auth provider and are shown next to votes, so
they are normalised and screened before being stored.
"""
import re
from dataclasses import dataclass
from typing import Optional

MAX_TEXT_LENGTH = 500
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50

INAPPROPRIATE_WORDS = [
    # Spanish
    "culo",
    "mierda",
    "joder",
    "puta",
    "puto",
    "coño",
    "cabrón",
    "gilipollas",
    "pendejo",
    "maricón",
    "idiota",
    "estúpido",
    "tonto",
    # English
    "shit",
    "fuck",
    "damn",
    "ass",
    "bitch",
    "bastard",
    "idiot",
    "stupid",
    # Phrases
    "huele mal",
    "apesta",
    "feo",
    "ugly",
]

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_CHARS_RE = re.compile(r"[^\w\sáéíóúñüÁÉÍÓÚÑÜ.,!?¡¿-]")


@dataclass(frozen=True)
class NameValidation:
    is_valid: bool
    sanitized_name: str
    error: Optional[str] = None


def contains_inappropriate_content(text) -> bool:
    if not text or not isinstance(text, str):
        return False
    normalized = text.lower().strip()
    return any(word in normalized for word in INAPPROPRIATE_WORDS)


def sanitize_text(text):
    """Replace every filtered word (any case) with asterisks of the same length."""
    if not text or not isinstance(text, str):
        return text
    sanitized = text
    for word in INAPPROPRIATE_WORDS:
        sanitized = re.sub(re.escape(word), "*" * len(word), sanitized, flags=re.IGNORECASE)
    return sanitized


def clean_text(text):
    """Collapse whitespace, strip unsafe characters and cap the length."""
    if not text or not isinstance(text, str):
        return text
    cleaned = _WHITESPACE_RE.sub(" ", text.strip())
    cleaned = _UNSAFE_CHARS_RE.sub("", cleaned)
    return cleaned[:MAX_TEXT_LENGTH]


def validate_user_name(name) -> NameValidation:
    if not name or not isinstance(name, str):
        return NameValidation(is_valid=False, sanitized_name="", error="El nombre es requerido")

    cleaned = clean_text(name)

    if len(cleaned) < MIN_NAME_LENGTH:
        return NameValidation(
            is_valid=False,
            sanitized_name=cleaned,
            error=f"El nombre debe tener al menos {MIN_NAME_LENGTH} caracteres",
        )

    if len(cleaned) > MAX_NAME_LENGTH:
        return NameValidation(
            is_valid=False,
            sanitized_name=cleaned[:MAX_NAME_LENGTH],
            error=f"El nombre no puede tener más de {MAX_NAME_LENGTH} caracteres",
        )

    if contains_inappropriate_content(cleaned):
        return NameValidation(
            is_valid=False,
            sanitized_name=sanitize_text(cleaned),
            error="El nombre contiene contenido inapropiado",
        )

    return NameValidation(is_valid=True, sanitized_name=cleaned)
