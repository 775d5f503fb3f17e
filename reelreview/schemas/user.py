"""
User record schemas
"""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class User(BaseModel):
    """Stored user record (password_hash never leaves the service layer)"""
    id: str
    username: str
    email: str
    password_hash: str
    profile_picture: Optional[str] = None
    join_date: datetime

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Minimal user projection attached to reviews"""
    id: str
    username: str
    profile_picture: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
