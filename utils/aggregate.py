"""Initial-data snapshot: every visible collection of a user, decks carrying their cards."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List

from db import store
from db.database import get_conn
from utils.normalize import (
    coerce_id,
    normalize_card_kind,
    normalize_commentary,
    normalize_options,
    normalize_srs_level,
)

logger = logging.getLogger(__name__)

COLLECTIONS = ("folders", "decks", "flashcards", "planners", "files")


def _fetch_collection(name: str, user_id: int) -> List[Dict[str, Any]]:
    fetch = getattr(store, f"list_{name}")
    with get_conn() as conn:
        return fetch(conn, user_id)


def present_card(card: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": card.get("id"),
        "question": card.get("front"),
        "answer": card.get("back"),
        "commentary": normalize_commentary(card.get("commentary")),
        "type": normalize_card_kind(card.get("type")),
        "options": normalize_options(card.get("options")),
        "srsLevel": normalize_srs_level(card.get("srs_level")),
        "nextReviewDate": card.get("next_review_date"),
        # review history is not persisted
        "reviewHistory": [],
    }


def attach_cards(decks: List[Dict[str, Any]], flashcards: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Copy each deck with a `cards` list of its flashcards, compared by numeric id and owner."""
    by_deck: Dict[Any, List[Dict[str, Any]]] = {}
    for card in flashcards:
        key = coerce_id(card.get("deck_id"))
        if key is None:
            continue
        by_deck.setdefault(key, []).append(card)

    result = []
    for deck in decks:
        key = coerce_id(deck.get("id"))
        owner = deck.get("user_id")
        cards = [
            present_card(card)
            for card in by_deck.get(key, [])
            if card.get("user_id") == owner
        ]
        result.append({**deck, "cards": cards})
    return result


async def load_initial_data(user_id: int) -> Dict[str, Any]:
    """Fetch the five collections concurrently and assemble the snapshot.

    Any failed fetch fails the whole call. The reads are not wrapped in a
    transaction, so writes landing mid-snapshot can show up in some
    collections and not others.
    """
    logger.info("Loading initial data for user %s", user_id)
    results = await asyncio.gather(
        *(asyncio.to_thread(_fetch_collection, name, user_id) for name in COLLECTIONS)
    )
    data = dict(zip(COLLECTIONS, results))
    for name in COLLECTIONS:
        logger.debug("user %s: %d %s", user_id, len(data[name]), name)

    decks = attach_cards(data["decks"], data["flashcards"])
    logger.info("Returning %d decks for user %s", len(decks), user_id)
    return {
        "folders": data["folders"],
        "decks": decks,
        "flashcards": data["flashcards"],
        "planners": data["planners"],
        "files": data["files"],
    }
