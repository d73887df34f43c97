"""
velada/schemas/users.py
Public user representations
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    image: Optional[str] = None
    is_admin: bool
    created_at: datetime
    updated_at: datetime
