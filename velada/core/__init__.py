from .registry import (
    Participant,
    Combat,
    Registry,
    RegistryValidation,
    validate_registry,
    validate_participants_list,
    fighter_avatar_url,
)
from .editions import EDITIONS, load_registry, get_registry

__all__ = [
    "Participant",
    "Combat",
    "Registry",
    "RegistryValidation",
    "validate_registry",
    "validate_participants_list",
    "fighter_avatar_url",
    "EDITIONS",
    "load_registry",
    "get_registry",
]
