from pydantic import BaseModel, Field
from typing import Any, Optional

class FlashcardFields(BaseModel):
    front: Optional[str] = None
    back: Optional[str] = None
    commentary: Optional[str] = None
    type: Optional[str] = None
    options: Optional[Any] = None
    srs_level: Optional[int] = Field(default=None, ge=0)
    next_review_date: Optional[str] = None
    image_url: Optional[str] = None
    answer_image_url: Optional[str] = None

class FlashcardCreate(FlashcardFields):
    deck_id: Optional[int] = None

class FlashcardUpdate(FlashcardFields):
    pass
