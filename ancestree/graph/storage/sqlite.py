"""SQLite storage backend for members and relationships."""

import asyncio
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from ancestree.config import settings
from ancestree.graph.models import FamilyTreeExport
from ancestree.graph.storage.base import FamilyStorage
from ancestree.models import Member, Relationship

MEMBER_COLUMNS = (
    "id", "name", "date_of_birth", "place_of_birth", "date_of_death",
    "notes", "created_at", "updated_at",
)
RELATIONSHIP_COLUMNS = (
    "id", "type", "person1_id", "person2_id", "marriage_date",
    "divorce_date", "created_at", "updated_at",
)


class SQLiteStorage(FamilyStorage):
    """Store the family tree in a SQLite file.

    Each call opens its own connection; blocking work runs in a thread.
    """

    def __init__(self, db_path: Optional[str] = None):
        super().__init__()
        self.db_path = db_path or settings.database.tree_db_path
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self):
        """Open a connection, commit on success and always close."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self):
        """Initialize database schema."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS members (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    date_of_birth TEXT,
                    place_of_birth TEXT,
                    date_of_death TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS relationships (
                    id TEXT PRIMARY KEY,
                    type TEXT NOT NULL,
                    person1_id TEXT NOT NULL,
                    person2_id TEXT NOT NULL,
                    marriage_date TEXT,
                    divorce_date TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_rel_person1 ON relationships(person1_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_rel_person2 ON relationships(person2_id)")

    # ─────────────────────────────────────────
    # Row conversion
    # ─────────────────────────────────────────

    def _row_to_member(self, row: sqlite3.Row) -> Member:
        return Member.model_validate({key: row[key] for key in MEMBER_COLUMNS})

    def _row_to_relationship(self, row: sqlite3.Row) -> Relationship:
        return Relationship.model_validate({key: row[key] for key in RELATIONSHIP_COLUMNS})

    def _member_values(self, member: Member) -> tuple:
        data = member.model_dump(mode="json")
        return tuple(data[key] for key in MEMBER_COLUMNS)

    def _relationship_values(self, rel: Relationship) -> tuple:
        data = rel.model_dump(mode="json")
        return tuple(data[key] for key in RELATIONSHIP_COLUMNS)

    # ─────────────────────────────────────────
    # Blocking implementations
    # ─────────────────────────────────────────

    def _fetch_one(self, query: str, params: tuple) -> Optional[sqlite3.Row]:
        with self._connect() as conn:
            return conn.execute(query, params).fetchone()

    def _fetch_all(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._connect() as conn:
            return conn.execute(query, params).fetchall()

    def _write(self, statements: list[tuple[str, tuple]]) -> int:
        """Run statements in one transaction; return total rows changed."""
        changed = 0
        with self._connect() as conn:
            for query, params in statements:
                changed += conn.execute(query, params).rowcount
        return changed

    def _upsert_member_stmt(self, member: Member) -> tuple[str, tuple]:
        placeholders = ", ".join("?" for _ in MEMBER_COLUMNS)
        return (
            f"INSERT OR REPLACE INTO members ({', '.join(MEMBER_COLUMNS)}) VALUES ({placeholders})",
            self._member_values(member),
        )

    def _upsert_relationship_stmt(self, rel: Relationship) -> tuple[str, tuple]:
        placeholders = ", ".join("?" for _ in RELATIONSHIP_COLUMNS)
        return (
            f"INSERT OR REPLACE INTO relationships ({', '.join(RELATIONSHIP_COLUMNS)}) VALUES ({placeholders})",
            self._relationship_values(rel),
        )

    async def _run_write(self, statements: list[tuple[str, tuple]], notify_always: bool = False) -> None:
        changed = await asyncio.to_thread(self._write, statements)
        if changed or notify_always:
            self._notify()

    # ─────────────────────────────────────────
    # Members
    # ─────────────────────────────────────────

    async def get_member(self, member_id: str) -> Optional[Member]:
        row = await asyncio.to_thread(
            self._fetch_one, "SELECT * FROM members WHERE id = ?", (member_id,)
        )
        return self._row_to_member(row) if row else None

    async def get_all_members(self) -> list[Member]:
        rows = await asyncio.to_thread(self._fetch_all, "SELECT * FROM members ORDER BY created_at")
        return [self._row_to_member(row) for row in rows]

    async def save_member(self, member: Member) -> None:
        await self._run_write([self._upsert_member_stmt(member)])

    async def delete_member(self, member_id: str) -> None:
        await self._run_write([("DELETE FROM members WHERE id = ?", (member_id,))])

    # ─────────────────────────────────────────
    # Relationships
    # ─────────────────────────────────────────

    async def get_relationship(self, relationship_id: str) -> Optional[Relationship]:
        row = await asyncio.to_thread(
            self._fetch_one, "SELECT * FROM relationships WHERE id = ?", (relationship_id,)
        )
        return self._row_to_relationship(row) if row else None

    async def get_all_relationships(self) -> list[Relationship]:
        rows = await asyncio.to_thread(
            self._fetch_all, "SELECT * FROM relationships ORDER BY created_at"
        )
        return [self._row_to_relationship(row) for row in rows]

    async def get_relationships_for_member(self, member_id: str) -> list[Relationship]:
        rows = await asyncio.to_thread(
            self._fetch_all,
            "SELECT * FROM relationships WHERE person1_id = ? OR person2_id = ? ORDER BY created_at",
            (member_id, member_id),
        )
        return [self._row_to_relationship(row) for row in rows]

    async def save_relationship(self, relationship: Relationship) -> None:
        await self._run_write([self._upsert_relationship_stmt(relationship)])

    async def delete_relationship(self, relationship_id: str) -> None:
        await self._run_write([("DELETE FROM relationships WHERE id = ?", (relationship_id,))])

    # ─────────────────────────────────────────
    # Bulk
    # ─────────────────────────────────────────

    async def import_tree(self, data: FamilyTreeExport, clear_existing: bool = False) -> None:
        statements: list[tuple[str, tuple]] = []
        if clear_existing:
            statements.append(("DELETE FROM relationships", ()))
            statements.append(("DELETE FROM members", ()))
        statements.extend(self._upsert_member_stmt(m) for m in data.members)
        statements.extend(self._upsert_relationship_stmt(r) for r in data.relationships)
        await self._run_write(statements, notify_always=True)

    async def clear_all(self) -> None:
        await self._run_write(
            [("DELETE FROM relationships", ()), ("DELETE FROM members", ())],
            notify_always=True,
        )
