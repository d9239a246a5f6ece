from pydantic import BaseModel
from typing import Optional

class FolderCreate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None

class Folder(BaseModel):
    id: int
    user_id: int
    name: str
    type: str
    created_at: str
    deleted_at: Optional[str] = None

    class Config:
        from_attributes = True
