"""
velada/orm/vote.py
One user's choice of fighter in one combat

Rows are inserted once and only ever removed in bulk. The unique index on
(user_id, combat_id) is the authoritative one-vote-per-combat guard; the
service-level existence check only avoids the insert in the common case.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from velada.orm.base import Base, generate_uuid, utcnow


class Vote(Base):
    __tablename__ = "votes"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who voted"
    )

    participant_id = Column(
        String(50),
        nullable=False,
        index=True,
        comment="Fighter the vote goes to"
    )

    combat_id = Column(
        Integer,
        nullable=False,
        index=True,
        comment="Registry id of the combat"
    )

    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("user_id", "combat_id", name="uq_vote_user_combat"),
        Index("ix_vote_combat_participant", "combat_id", "participant_id"),
    )

    def __repr__(self):
        return f"<Vote(user_id={self.user_id}, combat_id={self.combat_id}, participant={self.participant_id})>"

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "participant_id": self.participant_id,
            "combat_id": self.combat_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
