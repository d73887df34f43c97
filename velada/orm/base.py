"""
velada/orm/base.py
Declarative base for all ORM models
"""
import uuid
from datetime import datetime

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid() -> str:
    """Primary key factory for text-keyed tables."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.utcnow()
