"""
velada/orm/combat_winner.py
Administratively recorded outcome of a combat

combat_id is the primary key, so a combat has at most one winner row.
Writes go through an insert-or-replace keyed on combat_id.
"""
from sqlalchemy import Column, Integer, String, DateTime

from velada.orm.base import Base, utcnow


class CombatWinner(Base):
    __tablename__ = "combat_winners"

    combat_id = Column(Integer, primary_key=True, autoincrement=False)
    participant_id = Column(String(50), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<CombatWinner(combat_id={self.combat_id}, participant={self.participant_id})>"

    def to_dict(self):
        return {
            "combat_id": self.combat_id,
            "participant_id": self.participant_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
