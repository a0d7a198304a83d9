"""
Facility settings service
Stores the singleton timing configuration. It is replaced wholesale and read
fresh on every use.
"""

from typing import Any, Dict, Optional

from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import SettingsNotFoundError
from ..engine.grid import closing_time, generate_slot_grid
from ..models.settings import DEFAULT_TIMING_CONFIG, TimingConfig
from .oplog import log_operation

CONFIG_FIELDS = tuple(TimingConfig.model_fields)


class SettingsService:
    """Timing configuration service"""

    def __init__(self, db: DatabaseManager = None):
        self.db = db or db_manager

    def get_config(self) -> Optional[TimingConfig]:
        """Latest saved configuration, or None"""
        row = self.db.fetch_one(
            f"SELECT {', '.join(CONFIG_FIELDS)} FROM nursery_settings "
            "ORDER BY created_at DESC, id DESC LIMIT 1"
        )
        return TimingConfig(**row) if row else None

    def require_config(self) -> TimingConfig:
        config = self.get_config()
        if config is None:
            raise SettingsNotFoundError("No settings found")
        return config

    def replace_config(self, config: TimingConfig, actor_id: Optional[int] = None) -> TimingConfig:
        """Replace the stored configuration"""
        data = config.model_dump()
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM nursery_settings")
            conn.execute(
                f"INSERT INTO nursery_settings ({', '.join(CONFIG_FIELDS)}) "
                f"VALUES ({', '.join('?' for _ in CONFIG_FIELDS)})",
                [data[field] for field in CONFIG_FIELDS],
            )
            log_operation(self.db, actor_id, "settings_replace", data)
        return self.require_config()

    def reset_config(self, actor_id: Optional[int] = None) -> TimingConfig:
        """Restore the default configuration"""
        return self.replace_config(DEFAULT_TIMING_CONFIG, actor_id)

    @staticmethod
    def describe(config: TimingConfig) -> Dict[str, Any]:
        """Configuration plus the derived day layout"""
        data = config.model_dump()
        data["slot_start_times"] = generate_slot_grid(config)
        data["closing_time"] = closing_time(config)
        return data
