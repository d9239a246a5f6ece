import logging

from fastapi import APIRouter, Depends, status

from db import store
from db.database import get_db
from models.flashcard import FlashcardCreate, FlashcardFields, FlashcardUpdate
from utils.auth import CurrentUser, get_current_user
from utils.errors import NotFound, ValidationError
from utils.normalize import encode_options, is_blank, missing_fields, normalize_card_kind

logger = logging.getLogger(__name__)
router = APIRouter()


def flashcard_values(card: FlashcardFields) -> dict:
    """Every updatable column, unsupplied ones reset to their defaults."""
    return {
        "front": card.front or "",
        "back": card.back or "",
        "commentary": card.commentary or "",
        "srs_level": card.srs_level or 0,
        "next_review_date": card.next_review_date or None,
        "type": normalize_card_kind(card.type),
        "options": encode_options(card.options),
        "image_url": card.image_url or None,
        "answer_image_url": card.answer_image_url or None,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_flashcard(
    card: FlashcardCreate,
    user: CurrentUser = Depends(get_current_user),
    conn = Depends(get_db),
):
    missing = missing_fields(card.model_dump(), ["deck_id", "front", "back"])
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if store.get_deck(conn, user.id, card.deck_id) is None:
        raise NotFound("Deck not found")
    row = store.insert_flashcard(conn, user.id, card.deck_id, flashcard_values(card))
    logger.info("Flashcard %s created in deck %s", row["id"], card.deck_id)
    return row


@router.put("/{card_id}")
def update_flashcard(
    card_id: int,
    card: FlashcardUpdate,
    user: CurrentUser = Depends(get_current_user),
    conn = Depends(get_db),
):
    """Full replacement: omitted fields go back to their defaults."""
    if is_blank(card.front) and is_blank(card.back):
        raise ValidationError("Front or back is required")
    row = store.replace_flashcard(conn, user.id, card_id, flashcard_values(card))
    if row is None:
        raise NotFound("Flashcard not found")
    logger.info("Flashcard %s updated", card_id)
    return row


@router.delete("/{card_id}")
def delete_flashcard(card_id: int, user: CurrentUser = Depends(get_current_user), conn = Depends(get_db)):
    """Hard delete, unlike folders and decks."""
    if not store.delete_flashcard(conn, user.id, card_id):
        raise NotFound("Flashcard not found")
    logger.info("Flashcard %s deleted", card_id)
    return {"message": "Flashcard deleted", "id": card_id}
