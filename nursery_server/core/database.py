"""
Database connection and schema management.
A single DuckDB connection shared by the process, guarded by a re-entrant
lock; all statements go through the manager so the lock is always held.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import duckdb

from .exceptions import ConcurrencyError, DatabaseError
from ..config.settings import settings

logger = logging.getLogger(__name__)

# Table layout. Child rows reference their period by id only; cascades are
# performed explicitly by the period store.
SCHEMA_SQL = r"""
CREATE SEQUENCE IF NOT EXISTS nursery_settings_id_seq;
CREATE TABLE IF NOT EXISTS nursery_settings (
  id INTEGER DEFAULT nextval('nursery_settings_id_seq') PRIMARY KEY,
  opening_time TEXT NOT NULL,
  slot_interval INTEGER NOT NULL,
  slot_duration INTEGER NOT NULL,
  breakfast_duration INTEGER NOT NULL,
  lunch_duration INTEGER NOT NULL,
  nap_duration INTEGER NOT NULL,
  snack_duration INTEGER NOT NULL,
  slots_per_day INTEGER CHECK(slots_per_day IN (4, 5)) NOT NULL,
  created_at TIMESTAMP DEFAULT now()
);

CREATE SEQUENCE IF NOT EXISTS classrooms_id_seq;
CREATE TABLE IF NOT EXISTS classrooms (
  id INTEGER DEFAULT nextval('classrooms_id_seq') PRIMARY KEY,
  name TEXT NOT NULL,
  category TEXT,
  capacity INTEGER,
  created_at TIMESTAMP DEFAULT now()
);

CREATE SEQUENCE IF NOT EXISTS schedule_periods_id_seq;
CREATE TABLE IF NOT EXISTS schedule_periods (
  id INTEGER DEFAULT nextval('schedule_periods_id_seq') PRIMARY KEY,
  classroom_id INTEGER NOT NULL,
  name TEXT NOT NULL,
  start_date DATE NOT NULL,
  end_date DATE,
  is_active BOOLEAN DEFAULT FALSE,
  created_at TIMESTAMP DEFAULT now(),
  updated_at TIMESTAMP DEFAULT now()
);

CREATE SEQUENCE IF NOT EXISTS schedules_id_seq;
CREATE TABLE IF NOT EXISTS schedules (
  id INTEGER DEFAULT nextval('schedules_id_seq') PRIMARY KEY,
  schedule_period_id INTEGER NOT NULL,
  day_of_week TEXT CHECK(day_of_week IN ('SUNDAY','MONDAY','TUESDAY','WEDNESDAY','THURSDAY')) NOT NULL,
  start_time TEXT NOT NULL,
  end_time TEXT NOT NULL,
  activity TEXT NOT NULL,
  location TEXT,
  category TEXT,
  created_at TIMESTAMP DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_schedules_period ON schedules(schedule_period_id);

CREATE SEQUENCE IF NOT EXISTS menu_periods_id_seq;
CREATE TABLE IF NOT EXISTS menu_periods (
  id INTEGER DEFAULT nextval('menu_periods_id_seq') PRIMARY KEY,
  category TEXT NOT NULL,
  name TEXT NOT NULL,
  start_date DATE NOT NULL,
  end_date DATE,
  is_active BOOLEAN DEFAULT FALSE,
  created_at TIMESTAMP DEFAULT now(),
  updated_at TIMESTAMP DEFAULT now()
);

CREATE SEQUENCE IF NOT EXISTS menu_meals_id_seq;
CREATE TABLE IF NOT EXISTS menu_meals (
  id INTEGER DEFAULT nextval('menu_meals_id_seq') PRIMARY KEY,
  menu_period_id INTEGER NOT NULL,
  day_of_week TEXT CHECK(day_of_week IN ('SUNDAY','MONDAY','TUESDAY','WEDNESDAY','THURSDAY')) NOT NULL,
  meal_type TEXT CHECK(meal_type IN ('Breakfast','Lunch','Gouter')) NOT NULL,
  starter TEXT,
  main_course TEXT,
  side_dish TEXT,
  dessert TEXT,
  drink TEXT,
  snack TEXT,
  special_note TEXT,
  created_at TIMESTAMP DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_menu_meals_period ON menu_meals(menu_period_id);

CREATE SEQUENCE IF NOT EXISTS logs_id_seq;
CREATE TABLE IF NOT EXISTS logs (
  log_id INTEGER DEFAULT nextval('logs_id_seq') PRIMARY KEY,
  actor_id INTEGER,
  action TEXT,
  detail_json JSON,
  created_at TIMESTAMP DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_logs_action ON logs(action);
"""


def rows_to_dicts(cursor) -> List[Dict[str, Any]]:
    """Convert the pending result of a cursor into a list of dicts"""
    columns = [col[0] for col in cursor.description or []]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


class DatabaseManager:
    """Database manager wrapping every DuckDB access"""

    def __init__(self, db_path: Optional[str] = None):
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.RLock()
        self._tx_depth = 0
        self.db_path = db_path or self._get_db_path_from_settings()

    def _get_db_path_from_settings(self) -> str:
        """Read the database path from settings"""
        db_url = settings.database_url
        if db_url.startswith("duckdb://"):
            return db_url.replace("duckdb://", "", 1)
        return db_url

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        """Lazily opened connection"""
        if self._connection is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._connection = duckdb.connect(self.db_path)
            self._init_schema()
        return self._connection

    def _init_schema(self):
        try:
            self._connection.execute(SCHEMA_SQL)
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to initialize schema: {e}")

    def init_database(self):
        """Open the connection and make sure the schema exists"""
        with self._lock:
            self.connection.execute(SCHEMA_SQL)
        logger.info("Database ready at %s", self.db_path)

    def close(self):
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    @contextmanager
    def transaction(self) -> Generator[duckdb.DuckDBPyConnection, None, None]:
        """
        Transaction context manager.

        Re-entrant: a nested block joins the outer transaction, and only the
        outermost block commits or rolls back.
        """
        with self._lock:
            conn = self.connection
            if self._tx_depth:
                self._tx_depth += 1
                try:
                    yield conn
                finally:
                    self._tx_depth -= 1
                return

            conn.execute("BEGIN TRANSACTION")
            self._tx_depth = 1
            try:
                yield conn
                conn.execute("COMMIT")
            except Exception as e:
                try:
                    conn.execute("ROLLBACK")
                except duckdb.Error:
                    logger.exception("Rollback failed")
                if isinstance(e, duckdb.Error):
                    if isinstance(e, duckdb.TransactionException) or "conflict" in str(e).lower():
                        raise ConcurrencyError("Concurrent modification, please retry")
                    raise DatabaseError(f"Database operation failed: {e}")
                raise
            finally:
                self._tx_depth = 0

    def execute(self, query: str, params: list = None):
        """Run a statement without reading its result"""
        try:
            with self._lock:
                self.connection.execute(query, params or [])
        except duckdb.Error as e:
            raise DatabaseError(f"Query execution failed: {e}")

    def fetch_all(self, query: str, params: list = None) -> List[Dict[str, Any]]:
        """Run a query and return every row as a dict"""
        try:
            with self._lock:
                cursor = self.connection.execute(query, params or [])
                return rows_to_dicts(cursor)
        except duckdb.Error as e:
            raise DatabaseError(f"Query execution failed: {e}")

    def fetch_one(self, query: str, params: list = None) -> Optional[Dict[str, Any]]:
        """Run a query and return the first row as a dict"""
        rows = self.fetch_all(query, params)
        return rows[0] if rows else None


# Global database manager
db_manager = DatabaseManager()
