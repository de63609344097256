"""Domain Entities - Admin accounts"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from typing import Optional


class User(BaseModel):
    """Dashboard user allowed to manage bookings and pricing"""
    user_id: UUID = Field(default_factory=uuid4)
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str = "admin"
    disabled: bool = False

    class Config:
        from_attributes = True


class UserInDB(User):
    hashed_password: str
