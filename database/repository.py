import copy
import logging
from typing import Any, Dict, List, Optional

from config.settings import DATA_BACKEND
from database.supabase_client import get_supabase

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class Repository:
    """
    Table-oriented data access used by every service.

    Filters are equality matches keyed by column name. A list, tuple or set
    value matches any of its members.
    """

    def find(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        raise NotImplementedError

    def find_one(self, table: str, filters: Dict[str, Any]) -> Optional[Row]:
        rows = self.find(table, filters, limit=1)
        return rows[0] if rows else None

    def insert(self, table: str, row: Row) -> Row:
        raise NotImplementedError

    def update(self, table: str, filters: Dict[str, Any], changes: Row) -> List[Row]:
        raise NotImplementedError

    def upsert(self, table: str, row: Row, on_conflict: str) -> Row:
        raise NotImplementedError

    def delete(self, table: str, filters: Dict[str, Any]) -> List[Row]:
        raise NotImplementedError


class SupabaseRepository(Repository):
    """Repository backed by Supabase (PostgREST) tables."""

    def __init__(self, client=None):
        self.supabase = client or get_supabase()

    @staticmethod
    def _apply_filters(query, filters: Optional[Dict[str, Any]]):
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set)):
                query = query.in_(column, list(value))
            else:
                query = query.eq(column, value)
        return query

    def find(self, table, filters=None, order_by=None, descending=False, limit=None):
        query = self._apply_filters(self.supabase.table(table).select("*"), filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        result = query.execute()
        return result.data or []

    def insert(self, table, row):
        result = self.supabase.table(table).insert(row).execute()
        if not result.data:
            raise RuntimeError(f"Insert into {table} returned no data")
        return result.data[0]

    def update(self, table, filters, changes):
        query = self._apply_filters(self.supabase.table(table).update(changes), filters)
        result = query.execute()
        return result.data or []

    def upsert(self, table, row, on_conflict):
        result = self.supabase.table(table).upsert(row, on_conflict=on_conflict).execute()
        if not result.data:
            raise RuntimeError(f"Upsert into {table} returned no data")
        return result.data[0]

    def delete(self, table, filters):
        query = self._apply_filters(self.supabase.table(table).delete(), filters)
        result = query.execute()
        return result.data or []


class InMemoryRepository(Repository):
    """
    Dictionary-backed repository for local runs and tests.

    Rows without an ``id`` get the next integer id for their table.
    Returned rows are copies, so callers never mutate stored state.
    """

    def __init__(self, tables: Optional[Dict[str, List[Row]]] = None):
        self.tables: Dict[str, List[Row]] = {}
        self._next_ids: Dict[str, int] = {}
        for table, rows in (tables or {}).items():
            for row in rows:
                self.insert(table, row)

    @staticmethod
    def _matches(row: Row, filters: Optional[Dict[str, Any]]) -> bool:
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set)):
                if row.get(column) not in value:
                    return False
            elif row.get(column) != value:
                return False
        return True

    def _assign_id(self, table: str, row: Row) -> None:
        next_id = self._next_ids.get(table, 1)
        if row.get("id") is None:
            row["id"] = next_id
            self._next_ids[table] = next_id + 1
        elif isinstance(row["id"], int) and row["id"] >= next_id:
            self._next_ids[table] = row["id"] + 1

    def find(self, table, filters=None, order_by=None, descending=False, limit=None):
        rows = [r for r in self.tables.get(table, []) if self._matches(r, filters)]
        if order_by:
            # None sorts last in ascending order, first in descending
            rows.sort(
                key=lambda r: (r.get(order_by) is not None, r.get(order_by) if r.get(order_by) is not None else ""),
                reverse=descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return [copy.deepcopy(r) for r in rows]

    def insert(self, table, row):
        stored = copy.deepcopy(row)
        self._assign_id(table, stored)
        self.tables.setdefault(table, []).append(stored)
        return copy.deepcopy(stored)

    def update(self, table, filters, changes):
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, filters):
                row.update(copy.deepcopy(changes))
                updated.append(copy.deepcopy(row))
        return updated

    def upsert(self, table, row, on_conflict):
        existing = [r for r in self.tables.get(table, []) if r.get(on_conflict) == row.get(on_conflict)]
        if existing:
            existing[0].update(copy.deepcopy(row))
            return copy.deepcopy(existing[0])
        return self.insert(table, row)

    def delete(self, table, filters):
        rows = self.tables.get(table, [])
        removed = [r for r in rows if self._matches(r, filters)]
        self.tables[table] = [r for r in rows if not self._matches(r, filters)]
        return removed


_repository: Optional[Repository] = None


def get_repository() -> Repository:
    """FastAPI dependency returning the configured repository."""
    global _repository
    if _repository is None:
        if DATA_BACKEND == "memory":
            logger.info("Using in-memory data store")
            _repository = InMemoryRepository()
        else:
            _repository = SupabaseRepository()
    return _repository
