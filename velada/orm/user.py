"""
velada/orm/user.py
User model

Users are created on first sight of an authenticated identity (email is the
natural key) and are read-only to the voting and winner services.
"""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from velada.orm.base import Base, generate_uuid, utcnow


class User(Base):
    """
    Authenticated voter.

    KEY FIELDS:
    - email: unique identity supplied by the auth provider
    - is_admin: gates winner recording and the reset operations
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    image = Column(String(500), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    votes = relationship(
        "Vote",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', admin={self.is_admin})>"

    def to_dict(self):
        """Public representation (no auth internals)."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "image": self.image,
            "is_admin": self.is_admin,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
