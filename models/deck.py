from pydantic import BaseModel
from typing import Optional

class DeckCreate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None

class Deck(BaseModel):
    id: int
    user_id: int
    folder_id: Optional[int] = None
    name: str
    type: str
    created_at: str
    deleted_at: Optional[str] = None

    class Config:
        from_attributes = True
