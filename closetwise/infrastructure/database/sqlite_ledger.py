"""
SQLite-backed wardrobe ledger.

Stores items, wear events, outfit ratings and rediscovery challenges in a
local SQLite file. List-valued columns are JSON encoded and timestamps
are ISO-8601 UTC strings, so lexical order matches chronological order.

The challenge progress compare-and-swap is a single conditional
``UPDATE ... WHERE progress = ?``: the row is only written when the
stored progress still equals the value the caller read.

Example:
    >>> from closetwise.infrastructure.database import SQLiteLedger
    >>> ledger = SQLiteLedger("data/closetwise.db")
    >>> ledger.add_item(item)
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from closetwise.domain.entities.challenge import ChallengeType, RediscoveryChallenge
from closetwise.domain.entities.wardrobe_item import OutfitRating, WardrobeItem, WearEvent
from closetwise.domain.interfaces.ledger_interface import WardrobeLedger
from closetwise.utils.dates import ensure_utc
from closetwise.utils.exceptions import (
    ConflictError,
    InvalidInputError,
    LedgerUnavailableError,
    NotFoundError,
)
from closetwise.utils.logger import get_logger, log_exception

logger = get_logger(__name__)


# ============================================
# Schema
# ============================================

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS wardrobe_items (
        item_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT,
        category TEXT NOT NULL,
        colors TEXT,
        brand TEXT,
        purchase_price REAL NOT NULL DEFAULT 0,
        purchase_date TEXT,
        tags TEXT,
        image_url TEXT,
        tombstoned INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS wear_events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        item_id TEXT NOT NULL,
        user_id TEXT NOT NULL,
        worn_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS outfit_ratings (
        rating_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        outfit_id TEXT NOT NULL,
        item_ids TEXT NOT NULL,
        confidence REAL NOT NULL,
        worn_on TEXT NOT NULL,
        note TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS rediscovery_challenges (
        challenge_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        challenge_type TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        target_item_ids TEXT NOT NULL,
        progress INTEGER NOT NULL DEFAULT 0,
        counted_item_ids TEXT NOT NULL,
        reward TEXT,
        created_at TEXT NOT NULL,
        expires_at TEXT NOT NULL,
        completed_at TEXT
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_wear_events_user ON wear_events (user_id, worn_at);",
    "CREATE INDEX IF NOT EXISTS idx_wear_events_item ON wear_events (item_id, worn_at);",
    "CREATE INDEX IF NOT EXISTS idx_ratings_user ON outfit_ratings (user_id, worn_on);",
)


def _to_text(value: Optional[datetime]) -> Optional[str]:
    return ensure_utc(value).isoformat(timespec="microseconds") if value is not None else None


def _from_text(raw: Optional[str]) -> Optional[datetime]:
    return ensure_utc(datetime.fromisoformat(raw)) if raw else None


class SQLiteLedger(WardrobeLedger):
    """Local SQLite-backed WardrobeLedger."""

    def __init__(self, database_path: str | Path = "data/closetwise.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()
        logger.info(f"SQLite ledger ready at {self.database_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(
        self, operation: str, sql: str, params: Sequence = ()
    ) -> Tuple[List[sqlite3.Row], int]:
        """Run one statement in its own transaction, mapping driver errors.

        Returns:
            Fetched rows and the affected row count.
        """
        try:
            with self._connect() as conn:
                cursor = conn.execute(sql, tuple(params))
                return cursor.fetchall(), cursor.rowcount
        except sqlite3.Error as e:
            log_exception(logger, f"SQLite {operation}", e)
            raise LedgerUnavailableError(
                f"Ledger {operation} failed: {e}", operation=operation
            ) from e

    def _ensure_tables(self) -> None:
        try:
            with self._connect() as conn:
                for statement in SCHEMA:
                    conn.execute(statement)
        except sqlite3.Error as e:
            raise LedgerUnavailableError(
                f"Could not initialise ledger schema: {e}", operation="init"
            ) from e

    @staticmethod
    def _serialise_list(values: Optional[Sequence[str]]) -> str:
        return json.dumps(list(values or []))

    @staticmethod
    def _deserialise_list(raw: Optional[str]) -> tuple:
        return tuple(json.loads(raw)) if raw else ()

    # ============================================
    # Row mapping
    # ============================================

    def _row_to_item(self, row: sqlite3.Row) -> WardrobeItem:
        return WardrobeItem(
            item_id=row["item_id"],
            user_id=row["user_id"],
            name=row["name"] or "",
            category=row["category"],
            colors=self._deserialise_list(row["colors"]),
            brand=row["brand"],
            purchase_price=float(row["purchase_price"]),
            purchase_date=_from_text(row["purchase_date"]),
            tags=self._deserialise_list(row["tags"]),
            image_url=row["image_url"],
            tombstoned=bool(row["tombstoned"]),
        )

    def _row_to_rating(self, row: sqlite3.Row) -> OutfitRating:
        return OutfitRating(
            rating_id=row["rating_id"],
            user_id=row["user_id"],
            outfit_id=row["outfit_id"],
            item_ids=self._deserialise_list(row["item_ids"]),
            confidence=float(row["confidence"]),
            worn_on=_from_text(row["worn_on"]),
            note=row["note"],
        )

    def _row_to_challenge(self, row: sqlite3.Row) -> RediscoveryChallenge:
        return RediscoveryChallenge(
            challenge_id=row["challenge_id"],
            user_id=row["user_id"],
            challenge_type=ChallengeType(row["challenge_type"]),
            title=row["title"],
            description=row["description"],
            target_item_ids=self._deserialise_list(row["target_item_ids"]),
            progress=int(row["progress"]),
            counted_item_ids=self._deserialise_list(row["counted_item_ids"]),
            reward=row["reward"] or "",
            created_at=_from_text(row["created_at"]),
            expires_at=_from_text(row["expires_at"]),
            completed_at=_from_text(row["completed_at"]),
        )

    # ============================================
    # Write helpers
    # ============================================

    def add_item(self, item: WardrobeItem) -> WardrobeItem:
        """Insert or replace a wardrobe item."""
        self._execute(
            "add_item",
            """
            INSERT OR REPLACE INTO wardrobe_items (
                item_id, user_id, name, category, colors, brand,
                purchase_price, purchase_date, tags, image_url, tombstoned
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item.item_id,
                item.user_id,
                item.name,
                item.category,
                self._serialise_list(item.colors),
                item.brand,
                item.purchase_price,
                _to_text(item.purchase_date),
                self._serialise_list(item.tags),
                item.image_url,
                int(item.tombstoned),
            ),
        )
        return item

    def tombstone_item(self, item_id: str) -> WardrobeItem:
        """Mark an item as deleted while keeping its history."""
        _, rowcount = self._execute(
            "tombstone_item",
            "UPDATE wardrobe_items SET tombstoned = 1 WHERE item_id = ?",
            (item_id,),
        )
        if rowcount == 0:
            raise NotFoundError("Item not found", entity="item", identifier=item_id)
        return self.get_item(item_id)

    def record_wear(self, item_id: str, worn_at: datetime) -> WearEvent:
        """Append a wear event for an existing item."""
        item = self.get_item(item_id)
        if item is None:
            raise NotFoundError("Item not found", entity="item", identifier=item_id)
        event = WearEvent(item_id=item_id, user_id=item.user_id, worn_at=ensure_utc(worn_at))
        self._execute(
            "record_wear",
            "INSERT INTO wear_events (item_id, user_id, worn_at) VALUES (?, ?, ?)",
            (event.item_id, event.user_id, _to_text(event.worn_at)),
        )
        return event

    def add_outfit_rating(self, rating: OutfitRating) -> OutfitRating:
        """Append an outfit rating."""
        self._execute(
            "add_outfit_rating",
            """
            INSERT INTO outfit_ratings (
                rating_id, user_id, outfit_id, item_ids, confidence, worn_on, note
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                rating.rating_id,
                rating.user_id,
                rating.outfit_id,
                self._serialise_list(rating.item_ids),
                rating.confidence,
                _to_text(rating.worn_on),
                rating.note,
            ),
        )
        return rating

    # ============================================
    # WardrobeLedger
    # ============================================

    def get_item(self, item_id: str) -> Optional[WardrobeItem]:
        rows, _ = self._execute(
            "get_item", "SELECT * FROM wardrobe_items WHERE item_id = ?", (item_id,)
        )
        return self._row_to_item(rows[0]) if rows else None

    def list_items(self, user_id: str, include_tombstoned: bool = False) -> List[WardrobeItem]:
        sql = "SELECT * FROM wardrobe_items WHERE user_id = ?"
        if not include_tombstoned:
            sql += " AND tombstoned = 0"
        rows, _ = self._execute("list_items", sql + " ORDER BY item_id", (user_id,))
        return [self._row_to_item(row) for row in rows]

    def list_wear_events(
        self,
        item_id: Optional[str] = None,
        user_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[WearEvent]:
        if item_id is None and user_id is None:
            raise InvalidInputError("Either item_id or user_id is required", field="item_id")
        clauses, params = [], []
        if item_id is not None:
            clauses.append("item_id = ?")
            params.append(item_id)
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if start is not None:
            clauses.append("worn_at >= ?")
            params.append(_to_text(start))
        if end is not None:
            clauses.append("worn_at < ?")
            params.append(_to_text(end))
        rows, _ = self._execute(
            "list_wear_events",
            f"SELECT * FROM wear_events WHERE {' AND '.join(clauses)} ORDER BY worn_at, id",
            params,
        )
        return [
            WearEvent(item_id=row["item_id"], user_id=row["user_id"], worn_at=_from_text(row["worn_at"]))
            for row in rows
        ]

    def list_outfit_ratings(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[OutfitRating]:
        sql = "SELECT * FROM outfit_ratings WHERE user_id = ?"
        params: list = [user_id]
        if start is not None:
            sql += " AND worn_on >= ?"
            params.append(_to_text(start))
        if end is not None:
            sql += " AND worn_on < ?"
            params.append(_to_text(end))
        rows, _ = self._execute("list_outfit_ratings", sql + " ORDER BY worn_on", params)
        return [self._row_to_rating(row) for row in rows]

    def get_challenge(self, challenge_id: str) -> Optional[RediscoveryChallenge]:
        rows, _ = self._execute(
            "get_challenge",
            "SELECT * FROM rediscovery_challenges WHERE challenge_id = ?",
            (challenge_id,),
        )
        return self._row_to_challenge(rows[0]) if rows else None

    def get_active_challenge(self, user_id: str) -> Optional[RediscoveryChallenge]:
        rows, _ = self._execute(
            "get_active_challenge",
            """
            SELECT * FROM rediscovery_challenges
            WHERE user_id = ? AND completed_at IS NULL
            ORDER BY created_at DESC LIMIT 1
            """,
            (user_id,),
        )
        return self._row_to_challenge(rows[0]) if rows else None

    def create_challenge(self, challenge: RediscoveryChallenge) -> RediscoveryChallenge:
        self._execute(
            "create_challenge",
            """
            INSERT INTO rediscovery_challenges (
                challenge_id, user_id, challenge_type, title, description,
                target_item_ids, progress, counted_item_ids, reward,
                created_at, expires_at, completed_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                challenge.challenge_id,
                challenge.user_id,
                challenge.challenge_type.value,
                challenge.title,
                challenge.description,
                self._serialise_list(challenge.target_item_ids),
                challenge.progress,
                self._serialise_list(challenge.counted_item_ids),
                challenge.reward,
                _to_text(challenge.created_at),
                _to_text(challenge.expires_at),
                _to_text(challenge.completed_at),
            ),
        )
        return challenge

    def update_challenge_progress(
        self,
        challenge_id: str,
        expected_progress: int,
        new_progress: int,
        counted_item_ids: Sequence[str],
        completed_at: Optional[datetime] = None,
    ) -> RediscoveryChallenge:
        _, rowcount = self._execute(
            "update_challenge_progress",
            """
            UPDATE rediscovery_challenges
            SET progress = ?, counted_item_ids = ?, completed_at = ?
            WHERE challenge_id = ? AND progress = ?
            """,
            (
                new_progress,
                self._serialise_list(counted_item_ids),
                _to_text(completed_at),
                challenge_id,
                expected_progress,
            ),
        )
        if rowcount == 0:
            current = self.get_challenge(challenge_id)
            if current is None:
                raise NotFoundError("Challenge not found", entity="challenge", identifier=challenge_id)
            raise ConflictError(
                challenge_id=challenge_id,
                expected_progress=expected_progress,
                actual_progress=current.progress,
            )
        return self.get_challenge(challenge_id)
