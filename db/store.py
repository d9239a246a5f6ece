"""Owner-scoped reads and writes for every entity table.

Each function takes an open connection and the caller's user id; the id is
part of every WHERE clause so no query can reach another user's rows.
sqlite failures surface as StoreUnavailable.
"""
from __future__ import annotations

import functools
import logging
import sqlite3
from typing import Any, Dict, List, Optional

from utils.errors import StoreUnavailable
from .schema import OWNED_TABLES

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _store_call(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"{func.__name__} failed: {exc}") from exc
    return wrapper


def _fetch_row(cursor: sqlite3.Cursor, table: str, row_id: int) -> Optional[Row]:
    cursor.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


@_store_call
def fetch_visible(conn: sqlite3.Connection, table: str, user_id: int, newest_first: bool = False) -> List[Row]:
    """Rows of `table` owned by `user_id` whose delete marker is unset."""
    if table not in OWNED_TABLES:
        raise ValueError(f"Unknown table: {table}")
    order = "created_at DESC, id DESC" if newest_first else "id"
    cursor = conn.cursor()
    cursor.execute(
        f"SELECT * FROM {table} WHERE user_id = ? AND deleted_at IS NULL ORDER BY {order}",
        (user_id,),
    )
    return [dict(row) for row in cursor.fetchall()]


def list_folders(conn, user_id: int) -> List[Row]:
    return fetch_visible(conn, "folders", user_id, newest_first=True)


def list_decks(conn, user_id: int) -> List[Row]:
    return fetch_visible(conn, "decks", user_id, newest_first=True)


def list_flashcards(conn, user_id: int) -> List[Row]:
    return fetch_visible(conn, "flashcards", user_id)


def list_planners(conn, user_id: int) -> List[Row]:
    return fetch_visible(conn, "planners", user_id)


def list_files(conn, user_id: int) -> List[Row]:
    return fetch_visible(conn, "files", user_id)


# Folders / decks ------------------------------------------------------------

@_store_call
def insert_folder(conn, user_id: int, name: str, kind: str) -> Row:
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO folders (user_id, name, type) VALUES (?, ?, ?)",
        (user_id, name, kind),
    )
    row = _fetch_row(cursor, "folders", cursor.lastrowid)
    conn.commit()
    return row


@_store_call
def insert_deck(conn, user_id: int, name: str, kind: str) -> Row:
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO decks (user_id, name, type, folder_id) VALUES (?, ?, ?, NULL)",
        (user_id, name, kind),
    )
    row = _fetch_row(cursor, "decks", cursor.lastrowid)
    conn.commit()
    return row


@_store_call
def get_deck(conn, user_id: int, deck_id: int) -> Optional[Row]:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM decks WHERE id = ? AND user_id = ? AND deleted_at IS NULL",
        (deck_id, user_id),
    )
    row = cursor.fetchone()
    return dict(row) if row else None


@_store_call
def soft_delete(conn, table: str, user_id: int, row_id: int) -> bool:
    """Set the delete marker on a visible row. False when nothing matched."""
    if table not in OWNED_TABLES:
        raise ValueError(f"Unknown table: {table}")
    cursor = conn.cursor()
    cursor.execute(
        f"UPDATE {table} SET deleted_at = datetime('now') "
        "WHERE id = ? AND user_id = ? AND deleted_at IS NULL",
        (row_id, user_id),
    )
    conn.commit()
    return cursor.rowcount > 0


def soft_delete_folder(conn, user_id: int, folder_id: int) -> bool:
    return soft_delete(conn, "folders", user_id, folder_id)


def soft_delete_deck(conn, user_id: int, deck_id: int) -> bool:
    return soft_delete(conn, "decks", user_id, deck_id)


# Flashcards -----------------------------------------------------------------

FLASHCARD_FIELDS = (
    "front",
    "back",
    "commentary",
    "srs_level",
    "next_review_date",
    "type",
    "options",
    "image_url",
    "answer_image_url",
)


@_store_call
def insert_flashcard(conn, user_id: int, deck_id: int, values: Row) -> Row:
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO flashcards
            (user_id, deck_id, front, back, commentary, srs_level, type, options,
             next_review_date, image_url, answer_image_url)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            deck_id,
            values["front"],
            values["back"],
            values["commentary"],
            values["srs_level"],
            values["type"],
            values["options"],
            values["next_review_date"],
            values.get("image_url"),
            values.get("answer_image_url"),
        ),
    )
    row = _fetch_row(cursor, "flashcards", cursor.lastrowid)
    conn.commit()
    return row


@_store_call
def replace_flashcard(conn, user_id: int, card_id: int, values: Row) -> Optional[Row]:
    """Rewrite every updatable column. None when no row matches id and owner."""
    assignments = ", ".join(f"{field} = ?" for field in FLASHCARD_FIELDS)
    cursor = conn.cursor()
    cursor.execute(
        f"UPDATE flashcards SET {assignments}, updated_at = datetime('now') "
        "WHERE id = ? AND user_id = ?",
        tuple(values[field] for field in FLASHCARD_FIELDS) + (card_id, user_id),
    )
    if cursor.rowcount == 0:
        conn.rollback()
        return None
    row = _fetch_row(cursor, "flashcards", card_id)
    conn.commit()
    return row


@_store_call
def delete_flashcard(conn, user_id: int, card_id: int) -> bool:
    """Hard delete. False when no row matches id and owner."""
    cursor = conn.cursor()
    cursor.execute(
        "DELETE FROM flashcards WHERE id = ? AND user_id = ?",
        (card_id, user_id),
    )
    conn.commit()
    return cursor.rowcount > 0


# Users ----------------------------------------------------------------------

@_store_call
def insert_user(conn, email: str, password_hash: str) -> Optional[Row]:
    """Create a user with an inactive subscription. None when the email is taken."""
    cursor = conn.cursor()
    try:
        cursor.execute(
            "INSERT INTO users (email, password_hash, subscription_status) VALUES (?, ?, 'inactive')",
            (email, password_hash),
        )
    except sqlite3.IntegrityError:
        conn.rollback()
        return None
    user_id = cursor.lastrowid
    conn.commit()
    logger.info("Created user id=%s", user_id)
    return {"id": user_id, "email": email}


@_store_call
def get_user_by_email(conn, email: str) -> Optional[Row]:
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM users WHERE email = ?", (email,))
    row = cursor.fetchone()
    return dict(row) if row else None
