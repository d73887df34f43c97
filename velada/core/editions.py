"""
velada/core/editions.py
Static combat data per event edition

Loaded once per process; the active edition comes from VELADA_EDITION.
"""
import logging
from functools import lru_cache

from velada.config import settings
from velada.core.registry import Registry, validate_participants_list

logger = logging.getLogger(__name__)


EDITIONS = {
    "2025": {
        "participants": [
            "peereira",
            "rivaldios",
            "perxitaa",
            "gaspi",
            "abby",
            "roro",
            "andoni",
            "carlos",
            "alana",
            "arigeli",
            "viruzz",
            "tomas",
            "grefg",
            "westcol",
        ],
        "combats": [
            (1, "peereira", "rivaldios", "2025"),
            (2, "perxitaa", "gaspi", "2025"),
            (3, "abby", "roro", "2025"),
            (4, "andoni", "carlos", "2025"),
            (5, "alana", "arigeli", "2025"),
            (6, "viruzz", "tomas", "2025"),
            (7, "grefg", "westcol", "2025"),
        ],
    },
}


def load_registry(edition: str) -> Registry:
    """Build the registry for an edition. Raises KeyError for unknown editions."""
    if edition not in EDITIONS:
        raise KeyError(f"Unknown edition '{edition}'. Available: {', '.join(sorted(EDITIONS))}")

    data = EDITIONS[edition]
    participants = validate_participants_list(data["participants"], 2 * len(data["combats"]))
    return Registry(participants, data["combats"])


@lru_cache(maxsize=None)
def get_registry() -> Registry:
    """Process-wide registry for the configured edition (FastAPI dependency)."""
    registry = load_registry(settings.edition)
    logger.info(
        f"Loaded edition {settings.edition}: "
        f"{registry.total_combats} combats, {len(registry.participants)} participants"
    )
    return registry
