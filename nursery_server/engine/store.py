"""
Period store.

Scoped persistence for one period family: periods, their entries, and the
batch mutations the activation sweep is built from. Deleting a period always
deletes its entries first, in the same transaction.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from ..core.database import DatabaseManager
from ..models.base import day_rank
from ..models.period import Period
from .scope import PeriodScope

PERIOD_COLUMNS = "id, {scope} AS scope_key, name, start_date, end_date, is_active, created_at, updated_at"


def _placeholders(values: Sequence[Any]) -> str:
    return ",".join(["?"] * len(values))


class PeriodStore:
    """Persistence for the periods and entries of one scope family"""

    def __init__(self, db: DatabaseManager, scope: PeriodScope):
        self.db = db
        self.scope = scope
        self._columns = PERIOD_COLUMNS.format(scope=scope.scope_column)

    # Periods

    def get(self, period_id: int) -> Optional[Period]:
        row = self.db.fetch_one(
            f"SELECT {self._columns} FROM {self.scope.period_table} WHERE id = ?",
            [period_id],
        )
        return Period(**row) if row else None

    def find_by_scope(self, scope_key: Any) -> List[Period]:
        rows = self.db.fetch_all(
            f"SELECT {self._columns} FROM {self.scope.period_table} "
            f"WHERE {self.scope.scope_column} = ? ORDER BY start_date, id",
            [scope_key],
        )
        return [Period(**row) for row in rows]

    def find_active(self, scope_key: Any = None) -> List[Period]:
        """Active periods, oldest start first"""
        query = f"SELECT {self._columns} FROM {self.scope.period_table} WHERE is_active"
        params: List[Any] = []
        if scope_key is not None:
            query += f" AND {self.scope.scope_column} = ?"
            params.append(scope_key)
        rows = self.db.fetch_all(query + " ORDER BY start_date, id", params)
        return [Period(**row) for row in rows]

    def find_upcoming(self, today: date, scope_key: Any = None) -> List[Period]:
        """Inactive periods starting after today"""
        query = (
            f"SELECT {self._columns} FROM {self.scope.period_table} "
            f"WHERE NOT is_active AND start_date > ?"
        )
        params: List[Any] = [today]
        if scope_key is not None:
            query += f" AND {self.scope.scope_column} = ?"
            params.append(scope_key)
        rows = self.db.fetch_all(query + " ORDER BY start_date, id", params)
        return [Period(**row) for row in rows]

    def create(self, scope_key: Any, name: str, start_date: date,
               end_date: Optional[date], is_active: bool) -> Period:
        with self.db.transaction() as conn:
            cursor = conn.execute(
                f"INSERT INTO {self.scope.period_table} "
                f"({self.scope.scope_column}, name, start_date, end_date, is_active) "
                f"VALUES (?, ?, ?, ?, ?) RETURNING id",
                [scope_key, name, start_date, end_date, is_active],
            )
            period_id = cursor.fetchone()[0]
        return self.get(period_id)

    def update(self, period_id: int, **fields: Any) -> Optional[Period]:
        if fields:
            assignments = ", ".join(f"{column} = ?" for column in fields)
            self.db.execute(
                f"UPDATE {self.scope.period_table} SET {assignments}, updated_at = now() WHERE id = ?",
                list(fields.values()) + [period_id],
            )
        return self.get(period_id)

    def delete_periods(self, period_ids: Iterable[int]) -> List[int]:
        """Delete periods and their entries, entries first"""
        ids = list(period_ids)
        if not ids:
            return []
        marks = _placeholders(ids)
        with self.db.transaction() as conn:
            conn.execute(
                f"DELETE FROM {self.scope.entry_table} WHERE {self.scope.entry_fk} IN ({marks})",
                ids,
            )
            conn.execute(f"DELETE FROM {self.scope.period_table} WHERE id IN ({marks})", ids)
        return ids

    # Sweep stages

    def _ids_where(self, condition: str, params: List[Any]) -> List[int]:
        rows = self.db.fetch_all(
            f"SELECT id FROM {self.scope.period_table} WHERE {condition} ORDER BY id",
            params,
        )
        return [row["id"] for row in rows]

    def _activate(self, ids: List[int]) -> List[int]:
        if ids:
            self.db.execute(
                f"UPDATE {self.scope.period_table} SET is_active = TRUE, updated_at = now() "
                f"WHERE id IN ({_placeholders(ids)})",
                ids,
            )
        return ids

    def delete_ended_before(self, cutoff: date) -> List[int]:
        """Delete every period whose end date is before the cutoff"""
        with self.db.transaction():
            return self.delete_periods(self._ids_where("end_date < ?", [cutoff]))

    def activate_starting_between(self, start: date, end: date) -> List[int]:
        """Activate inactive periods starting in [start, end)"""
        with self.db.transaction():
            ids = self._ids_where(
                "start_date >= ? AND start_date < ? AND NOT is_active", [start, end]
            )
            return self._activate(ids)

    def activate_started_before(self, day: date) -> List[int]:
        """Activate inactive periods whose start date has already passed"""
        with self.db.transaction():
            return self._activate(self._ids_where("start_date < ? AND NOT is_active", [day]))

    # Entries

    def _sorted(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return sorted(
            rows,
            key=lambda row: (day_rank(row["day_of_week"]), self.scope.rules.sort_key(row)),
        )

    def find_entries(self, period_id: int) -> List[Dict[str, Any]]:
        rows = self.db.fetch_all(
            f"SELECT id, {self.scope.entry_fk}, {', '.join(self.scope.entry_fields)} "
            f"FROM {self.scope.entry_table} WHERE {self.scope.entry_fk} = ?",
            [period_id],
        )
        return self._sorted(rows)

    def count_entries(self, period_ids: Sequence[int]) -> int:
        ids = list(period_ids)
        if not ids:
            return 0
        row = self.db.fetch_one(
            f"SELECT COUNT(*) AS total FROM {self.scope.entry_table} "
            f"WHERE {self.scope.entry_fk} IN ({_placeholders(ids)})",
            ids,
        )
        return row["total"]

    def replace_entries(self, period_id: int, entries: Sequence[BaseModel]) -> List[Dict[str, Any]]:
        """Swap the whole entry set of a period: delete all, then insert all"""
        fields = self.scope.entry_fields
        insert_sql = (
            f"INSERT INTO {self.scope.entry_table} ({self.scope.entry_fk}, {', '.join(fields)}) "
            f"VALUES (?, {_placeholders(fields)})"
        )
        with self.db.transaction() as conn:
            conn.execute(
                f"DELETE FROM {self.scope.entry_table} WHERE {self.scope.entry_fk} = ?",
                [period_id],
            )
            for entry in entries:
                data = entry.model_dump(mode="json")
                conn.execute(insert_sql, [period_id] + [data.get(field) for field in fields])
        return self.find_entries(period_id)
