"""
velada/core/registry.py
Participant and combat registry for one event edition

The registry is immutable once built. Services receive it by injection so a
different edition (or a test fixture) can stand in for the default one.

Participants are never passed around as raw strings past the registry
boundary: Registry.participant() is the only way to obtain one, and it
rejects names the edition does not know.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from velada.exceptions import InvalidParticipant

AVATAR_BASE_URL = "https://www.infolavelada.com/images/fighters"
AVATAR_SIZES = ("big", "cards")


@dataclass(frozen=True, order=True)
class Participant:
    """Opaque, validated fighter identifier."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Combat:
    id: int
    fighter1: Participant
    fighter2: Participant
    year: Optional[str] = None

    @property
    def fighters(self) -> Tuple[Participant, Participant]:
        return (self.fighter1, self.fighter2)

    def has_fighter(self, participant_id) -> bool:
        name = str(participant_id)
        return name == self.fighter1.name or name == self.fighter2.name

    def opponent_of(self, participant_id) -> Optional[Participant]:
        name = str(participant_id)
        if name == self.fighter1.name:
            return self.fighter2
        if name == self.fighter2.name:
            return self.fighter1
        return None

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "fighter1": self.fighter1.name,
            "fighter2": self.fighter2.name,
            "year": self.year,
        }


@dataclass(frozen=True)
class RegistryValidation:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


class Registry:
    """
    Lookup and validation over a fixed list of combats.

    Args:
        participants: ordered fighter names for the edition
        combats: (id, fighter1, fighter2, year) tuples; every fighter name
            must appear in participants
    """

    def __init__(self, participants: Sequence[str], combats: Iterable[Tuple[int, str, str, Optional[str]]]):
        self._participants: Dict[str, Participant] = {}
        for name in participants:
            self._participants.setdefault(name, Participant(name))

        built = []
        for combat_id, fighter1, fighter2, year in combats:
            built.append(Combat(
                id=combat_id,
                fighter1=self.participant(fighter1),
                fighter2=self.participant(fighter2),
                year=year,
            ))
        self._combats: Tuple[Combat, ...] = tuple(built)

    # ================= PARTICIPANTS =================

    @property
    def participants(self) -> Tuple[Participant, ...]:
        return tuple(self._participants.values())

    def is_valid_participant(self, name) -> bool:
        return isinstance(name, (str, Participant)) and str(name) in self._participants

    def participant(self, name) -> Participant:
        """Return the edition's Participant for name, or raise InvalidParticipant."""
        if not self.is_valid_participant(name):
            raise InvalidParticipant(name)
        return self._participants[str(name)]

    # ================= COMBATS =================

    @property
    def combats(self) -> Tuple[Combat, ...]:
        return self._combats

    @property
    def total_combats(self) -> int:
        return len(self._combats)

    def get_combat_by_id(self, combat_id) -> Optional[Combat]:
        for combat in self._combats:
            if combat.id == combat_id:
                return combat
        return None

    def get_combats_by_fighter(self, participant_id) -> List[Combat]:
        return [combat for combat in self._combats if combat.has_fighter(participant_id)]

    def is_participant_in_combat(self, participant_id, combat_id) -> bool:
        combat = self.get_combat_by_id(combat_id)
        if combat is None:
            return False
        return combat.has_fighter(participant_id)

    def get_opponent(self, participant_id) -> Optional[Participant]:
        combats = self.get_combats_by_fighter(participant_id)
        if not combats:
            return None
        return combats[0].opponent_of(participant_id)

    # ================= VALIDATION =================

    def validate(self) -> RegistryValidation:
        return validate_registry(self._combats, [participant.name for participant in self.participants])


def validate_registry(
    combats: Sequence[Combat],
    participants: Optional[Sequence[str]] = None,
) -> RegistryValidation:
    """
    Check combat data for duplicate ids, duplicate pairings (in either
    order), self-pairings and fighters booked into more than one combat.
    When participants is given, every one of them must be booked exactly once.
    """
    errors: List[str] = []

    ids = [combat.id for combat in combats]
    if len(ids) != len(set(ids)):
        errors.append("Duplicate combat IDs found")

    pairings = [tuple(sorted((combat.fighter1.name, combat.fighter2.name))) for combat in combats]
    if len(pairings) != len(set(pairings)):
        errors.append("Duplicate fighter pairings found")

    for combat in combats:
        if combat.fighter1 == combat.fighter2:
            errors.append(f"Combat {combat.id} pairs {combat.fighter1} against themselves")

    fighter_counts = Counter()
    for combat in combats:
        fighter_counts.update({combat.fighter1.name, combat.fighter2.name})
    for fighter, count in fighter_counts.items():
        if count > 1:
            errors.append(f"Fighter {fighter} appears in multiple combats")
    for name in participants or ():
        if fighter_counts[name] == 0:
            errors.append(f"Fighter {name} is not booked in any combat")

    return RegistryValidation(is_valid=not errors, errors=errors)


def validate_participants_list(participants: Sequence[str], expected_count: int) -> List[str]:
    """Raise ValueError unless participants are unique and exactly expected_count long."""
    if len(set(participants)) != len(participants):
        raise ValueError("Duplicate entries found in participants list.")
    if len(participants) != expected_count:
        raise ValueError(
            f"Participants list length does not match the expected count of {expected_count}."
        )
    return list(participants)


def fighter_avatar_url(participant, size: str = "cards") -> str:
    if size not in AVATAR_SIZES:
        raise ValueError(f"size must be one of: {', '.join(AVATAR_SIZES)}")
    return f"{AVATAR_BASE_URL}/{size}/{participant}.webp"
