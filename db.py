"""SQLite persistence for stories, decks and vocabulary."""
import os
import sqlite3
import time
from pathlib import Path
from typing import Optional, List, Dict, Any

from log import get_logger

logger = get_logger("lingotales.db")

DB_PATH = Path(os.environ.get("LINGOTALES_DB_PATH", Path(__file__).parent / "lingotales.db"))


def get_db() -> sqlite3.Connection:
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db():
    conn = get_db()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS stories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            content TEXT NOT NULL,
            reading_level TEXT NOT NULL,
            word_count INTEGER NOT NULL,
            created_at REAL NOT NULL
        );
        CREATE TABLE IF NOT EXISTS decks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT,
            created_at REAL NOT NULL
        );
        CREATE TABLE IF NOT EXISTS vocabulary (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            word TEXT NOT NULL,
            translation TEXT NOT NULL,
            part_of_speech TEXT NOT NULL DEFAULT '',
            context TEXT,
            deck_id INTEGER NOT NULL,
            created_at REAL NOT NULL,
            FOREIGN KEY (deck_id) REFERENCES decks(id) ON DELETE CASCADE
        );
        CREATE INDEX IF NOT EXISTS idx_vocabulary_deck ON vocabulary(deck_id);
    """)
    conn.close()
    logger.info("Database ready", extra={"component": "db", "detail": str(DB_PATH)})


# --- Row mapping ---

def _story(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "content": row["content"],
        "readingLevel": row["reading_level"],
        "wordCount": row["word_count"],
        "createdAt": row["created_at"],
    }


def _deck(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "description": row["description"],
        "createdAt": row["created_at"],
    }


def _vocab(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "word": row["word"],
        "translation": row["translation"],
        "partOfSpeech": row["part_of_speech"],
        "context": row["context"],
        "deckId": row["deck_id"],
        "createdAt": row["created_at"],
    }


# --- Stories ---

def create_story(title: str, content: str, reading_level: str, word_count: int) -> Dict[str, Any]:
    conn = get_db()
    try:
        cursor = conn.execute(
            "INSERT INTO stories (title, content, reading_level, word_count, created_at) VALUES (?, ?, ?, ?, ?)",
            (title, content, reading_level, word_count, time.time()),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM stories WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return _story(row)
    finally:
        conn.close()


def list_stories() -> List[Dict[str, Any]]:
    conn = get_db()
    try:
        rows = conn.execute("SELECT * FROM stories ORDER BY created_at DESC, id DESC").fetchall()
        return [_story(r) for r in rows]
    finally:
        conn.close()


def get_story(story_id: int) -> Optional[Dict[str, Any]]:
    conn = get_db()
    try:
        row = conn.execute("SELECT * FROM stories WHERE id = ?", (story_id,)).fetchone()
        return _story(row) if row else None
    finally:
        conn.close()


# --- Decks ---

def create_deck(name: str, description: Optional[str] = None) -> Dict[str, Any]:
    conn = get_db()
    try:
        cursor = conn.execute(
            "INSERT INTO decks (name, description, created_at) VALUES (?, ?, ?)",
            (name, description, time.time()),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM decks WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return {**_deck(row), "vocabulary": []}
    finally:
        conn.close()


def list_decks() -> List[Dict[str, Any]]:
    """All decks, newest first, each with its vocabulary nested."""
    conn = get_db()
    try:
        decks = [_deck(r) for r in conn.execute("SELECT * FROM decks ORDER BY created_at DESC, id DESC")]
        by_deck: Dict[int, List[Dict[str, Any]]] = {d["id"]: [] for d in decks}
        for row in conn.execute("SELECT * FROM vocabulary ORDER BY created_at, id"):
            by_deck.setdefault(row["deck_id"], []).append(_vocab(row))
        for deck in decks:
            deck["vocabulary"] = by_deck[deck["id"]]
        return decks
    finally:
        conn.close()


def get_deck(deck_id: int) -> Optional[Dict[str, Any]]:
    conn = get_db()
    try:
        row = conn.execute("SELECT * FROM decks WHERE id = ?", (deck_id,)).fetchone()
        if not row:
            return None
        vocab = conn.execute(
            "SELECT * FROM vocabulary WHERE deck_id = ? ORDER BY created_at, id", (deck_id,)
        ).fetchall()
        return {**_deck(row), "vocabulary": [_vocab(v) for v in vocab]}
    finally:
        conn.close()


def delete_deck(deck_id: int) -> bool:
    """Delete a deck; its vocabulary goes with it."""
    conn = get_db()
    try:
        cursor = conn.execute("DELETE FROM decks WHERE id = ?", (deck_id,))
        conn.commit()
        return cursor.rowcount > 0
    finally:
        conn.close()


# --- Vocabulary ---

def create_vocab_entry(word: str, translation: str, part_of_speech: str, context: Optional[str],
                       deck_id: int) -> Optional[Dict[str, Any]]:
    """Insert an entry. Returns None when the deck does not exist."""
    conn = get_db()
    try:
        if not conn.execute("SELECT 1 FROM decks WHERE id = ?", (deck_id,)).fetchone():
            return None
        cursor = conn.execute(
            "INSERT INTO vocabulary (word, translation, part_of_speech, context, deck_id, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (word, translation, part_of_speech or "", context, deck_id, time.time()),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM vocabulary WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return _vocab(row)
    finally:
        conn.close()


def list_vocabulary(deck_id: Optional[int] = None) -> List[Dict[str, Any]]:
    conn = get_db()
    try:
        if deck_id is None:
            rows = conn.execute("SELECT * FROM vocabulary ORDER BY created_at DESC, id DESC").fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM vocabulary WHERE deck_id = ? ORDER BY created_at DESC, id DESC", (deck_id,)
            ).fetchall()
        return [_vocab(r) for r in rows]
    finally:
        conn.close()


def update_vocab_entry(entry_id: int, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply a partial update. Unknown keys are ignored; returns None if missing."""
    columns = {"word": "word", "translation": "translation",
               "partOfSpeech": "part_of_speech", "context": "context"}
    changes = {columns[k]: v for k, v in patch.items()
               if k in columns and (v is not None or k == "context")}
    conn = get_db()
    try:
        if changes:
            assignments = ", ".join(f"{col} = ?" for col in changes)
            conn.execute(f"UPDATE vocabulary SET {assignments} WHERE id = ?", (*changes.values(), entry_id))
            conn.commit()
        row = conn.execute("SELECT * FROM vocabulary WHERE id = ?", (entry_id,)).fetchone()
        return _vocab(row) if row else None
    finally:
        conn.close()


def delete_vocab_entry(entry_id: int) -> bool:
    conn = get_db()
    try:
        cursor = conn.execute("DELETE FROM vocabulary WHERE id = ?", (entry_id,))
        conn.commit()
        return cursor.rowcount > 0
    finally:
        conn.close()
