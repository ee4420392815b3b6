"""
SQLite storage backend.
"""

import sqlite3
import threading
from pathlib import Path
from typing import List, Optional

from ..exceptions import CategoryConflictError, StorageError
from ..logging_config import get_logger
from ..models import Category, CategorySummary, Link, utc_now
from .base import Storage

logger = get_logger("storage.sqlite")

_LINK_COLUMNS = (
    "id, original_input, title, description, url, category_id, "
    "ai_description, owner, created_at"
)


class SQLiteStorage(Storage):
    """Stores categories and links in a local SQLite database."""

    def __init__(self, db_path: Path = Path("lincat.db")):
        self.db_path = Path(db_path)
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._create_tables()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e

    def _create_tables(self) -> None:
        """Create tables if they don't exist."""
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS categories (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                owner TEXT NOT NULL,
                created_at TEXT NOT NULL,
                UNIQUE (name, owner)
            );
            CREATE TABLE IF NOT EXISTS links (
                id TEXT PRIMARY KEY,
                original_input TEXT NOT NULL,
                title TEXT,
                description TEXT,
                url TEXT,
                category_id TEXT NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
                ai_description TEXT,
                owner TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_links_category ON links (category_id);
            CREATE INDEX IF NOT EXISTS idx_links_owner ON links (owner);
        """)
        self._conn.commit()

    def _query(self, sql: str, params: tuple = ()) -> list:
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise StorageError(f"Query failed: {e}") from e

    def _write(self, sql: str, params: tuple = ()) -> int:
        """Run one statement in its own transaction; returns rows affected."""
        with self._lock:
            try:
                with self._conn:
                    return self._conn.execute(sql, params).rowcount
            except sqlite3.Error as e:
                raise StorageError(f"Write failed: {e}") from e

    @staticmethod
    def _row_to_link(row: tuple) -> Link:
        (link_id, original_input, title, description, url,
         category_id, ai_description, owner, created_at) = row
        return Link(
            id=link_id,
            original_input=original_input,
            title=title or "",
            description=description or "",
            url=url or "",
            category_id=category_id,
            ai_description=ai_description or "",
            owner=owner,
            created_at=created_at,
        )

    def list_category_names(self, owner: str) -> List[str]:
        rows = self._query(
            "SELECT name FROM categories WHERE owner = ? ORDER BY created_at, rowid", (owner,)
        )
        return [row[0] for row in rows]

    def insert_category(self, category_id: str, name: str, owner: str) -> Category:
        category = Category(id=category_id, name=name, owner=owner, created_at=utc_now())
        with self._lock:
            try:
                with self._conn:
                    self._conn.execute(
                        "INSERT INTO categories (id, name, owner, created_at) VALUES (?, ?, ?, ?)",
                        (category.id, category.name, category.owner, category.created_at),
                    )
            except sqlite3.IntegrityError as e:
                if "UNIQUE" in str(e) and "categories.name" in str(e):
                    raise CategoryConflictError(name, owner) from e
                raise StorageError(f"Cannot insert category {name!r}: {e}") from e
            except sqlite3.Error as e:
                raise StorageError(f"Cannot insert category {name!r}: {e}") from e
        logger.debug("Inserted category %s (%r) for %s", category.id, name, owner)
        return category

    def find_category_id(self, name: str, owner: str) -> Optional[str]:
        rows = self._query(
            "SELECT id FROM categories WHERE name = ? AND owner = ?", (name, owner)
        )
        return rows[0][0] if rows else None

    def get_category(self, category_id: str, owner: str) -> Optional[Category]:
        rows = self._query(
            "SELECT id, name, owner, created_at FROM categories WHERE id = ? AND owner = ?",
            (category_id, owner),
        )
        if not rows:
            return None
        cid, name, cowner, created_at = rows[0]
        return Category(id=cid, name=name, owner=cowner, created_at=created_at)

    def insert_link(self, link: Link) -> Link:
        with self._lock:
            try:
                with self._conn:
                    owned = self._conn.execute(
                        "SELECT 1 FROM categories WHERE id = ? AND owner = ?",
                        (link.category_id, link.owner),
                    ).fetchone()
                    if owned is None:
                        raise StorageError(
                            f"Category {link.category_id} does not exist for owner {link.owner}"
                        )
                    self._conn.execute(
                        f"INSERT INTO links ({_LINK_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                        (link.id, link.original_input, link.title, link.description,
                         link.url, link.category_id, link.ai_description,
                         link.owner, link.created_at),
                    )
            except sqlite3.Error as e:
                raise StorageError(f"Cannot insert link: {e}") from e
        return link

    def list_categories(self, owner: str) -> List[CategorySummary]:
        rows = self._query(
            "SELECT c.id, c.name, c.owner, c.created_at, COUNT(l.id) "
            "FROM categories c LEFT JOIN links l ON l.category_id = c.id "
            "WHERE c.owner = ? GROUP BY c.id ORDER BY c.created_at DESC, c.rowid DESC",
            (owner,),
        )
        return [
            CategorySummary(id=cid, name=name, owner=cowner, created_at=created_at, link_count=count)
            for cid, name, cowner, created_at, count in rows
        ]

    def list_links(self, owner: str, category_id: Optional[str] = None) -> List[Link]:
        if category_id is None:
            rows = self._query(
                f"SELECT {_LINK_COLUMNS} FROM links WHERE owner = ? ORDER BY created_at DESC, rowid DESC",
                (owner,),
            )
        else:
            rows = self._query(
                f"SELECT {_LINK_COLUMNS} FROM links WHERE owner = ? AND category_id = ? "
                "ORDER BY created_at DESC, rowid DESC",
                (owner, category_id),
            )
        return [self._row_to_link(row) for row in rows]

    def get_link(self, link_id: str, owner: str) -> Optional[Link]:
        rows = self._query(
            f"SELECT {_LINK_COLUMNS} FROM links WHERE id = ? AND owner = ?", (link_id, owner)
        )
        return self._row_to_link(rows[0]) if rows else None

    def search_links(self, owner: str, query: str) -> List[Link]:
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        rows = self._query(
            f"SELECT {_LINK_COLUMNS} FROM links WHERE owner = ? AND ("
            "title LIKE ? ESCAPE '\\' OR description LIKE ? ESCAPE '\\' "
            "OR ai_description LIKE ? ESCAPE '\\' OR original_input LIKE ? ESCAPE '\\') "
            "ORDER BY created_at DESC, rowid DESC",
            (owner, pattern, pattern, pattern, pattern),
        )
        return [self._row_to_link(row) for row in rows]

    def delete_category(self, category_id: str, owner: str) -> bool:
        # Links go through ON DELETE CASCADE
        deleted = self._write(
            "DELETE FROM categories WHERE id = ? AND owner = ?", (category_id, owner)
        )
        return deleted > 0

    def delete_link(self, link_id: str, owner: str) -> bool:
        deleted = self._write("DELETE FROM links WHERE id = ? AND owner = ?", (link_id, owner))
        return deleted > 0

    def close(self) -> None:
        with self._lock:
            self._conn.close()
