"""
Operation log
Administrative writes are recorded in the logs table.
"""

import json
from typing import Any, Dict, Optional

from ..core.database import DatabaseManager


def log_operation(db: DatabaseManager, actor_id: Optional[int], action: str, details: Dict[str, Any]):
    db.execute(
        "INSERT INTO logs (actor_id, action, detail_json) VALUES (?, ?, ?)",
        [actor_id, action, json.dumps(details, ensure_ascii=False, default=str)],
    )
