from pydantic import BaseModel
from typing import Optional

class UserCredentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class UserPublic(BaseModel):
    id: int
    email: str
    subscription_status: Optional[str] = None

    class Config:
        from_attributes = True

class LoginResponse(BaseModel):
    token: str
    user: UserPublic
