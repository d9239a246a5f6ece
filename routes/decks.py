import logging
from typing import List

from fastapi import APIRouter, Depends, status

from db import store
from db.database import get_db
from models.deck import Deck, DeckCreate
from utils.auth import CurrentUser, get_current_user
from utils.errors import NotFound, ValidationError
from utils.normalize import missing_fields

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=List[Deck])
def list_decks(user: CurrentUser = Depends(get_current_user), conn = Depends(get_db)):
    """Visible decks, newest first."""
    return store.list_decks(conn, user.id)

@router.post("", status_code=status.HTTP_201_CREATED, response_model=Deck)
def create_deck(
    deck: DeckCreate,
    user: CurrentUser = Depends(get_current_user),
    conn = Depends(get_db),
):
    """New decks start unfiled (folder_id NULL)."""
    if missing_fields(deck.model_dump(), ["name", "type"]):
        raise ValidationError("Name and type are required")
    row = store.insert_deck(conn, user.id, deck.name.strip(), deck.type.strip())
    logger.info("Deck %s created for user %s", row["id"], user.id)
    return row

@router.delete("/{deck_id}")
def delete_deck(deck_id: int, user: CurrentUser = Depends(get_current_user), conn = Depends(get_db)):
    if not store.soft_delete_deck(conn, user.id, deck_id):
        raise NotFound("Deck not found")
    return {"message": "Deck deleted", "id": deck_id}
