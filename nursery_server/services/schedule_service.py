"""
Schedule service
Weekly activity schedules, one active period per classroom.
"""

from typing import Any, Dict, List

from ..core.exceptions import ClassroomNotFoundError
from ..engine.scope import SCHEDULE_SCOPE
from .period_service import PeriodService


class ScheduleService(PeriodService):
    """Schedule periods keyed by classroom id"""

    scope = SCHEDULE_SCOPE

    def get_classroom(self, classroom_id: int) -> Dict[str, Any]:
        row = self.db.fetch_one(
            "SELECT id, name, category, capacity FROM classrooms WHERE id = ?",
            [classroom_id],
        )
        if row is None:
            raise ClassroomNotFoundError(
                "Classroom not found", details={"classroom_id": classroom_id}
            )
        return row

    def ensure_scope(self, scope_key: Any) -> None:
        self.get_classroom(scope_key)

    def scope_label(self, scope_key: Any) -> str:
        return self.get_classroom(scope_key)["name"]

    def weekly_view(self, scope_key: Any) -> Dict[str, Any]:
        view = super().weekly_view(scope_key)
        view["classroom"] = self.get_classroom(scope_key)
        return view

    def list_active_periods(self, page: int = 1, per_page: int = 10) -> Dict[str, Any]:
        """
        Active schedule periods of every classroom, newest first.

        Args:
            page: 1-based page number
            per_page: page size, 0 returns everything

        Returns:
            items, total and facility-wide counters
        """
        self.refresh(strict=False)
        query = """
            SELECT p.id, p.name, p.start_date, p.end_date,
                   c.id AS classroom_id, c.name AS classroom_name,
                   c.category AS classroom_category, c.capacity AS classroom_capacity,
                   (SELECT COUNT(*) FROM schedules s WHERE s.schedule_period_id = p.id) AS slot_count
            FROM schedule_periods p
            LEFT JOIN classrooms c ON c.id = p.classroom_id
            WHERE p.is_active
            ORDER BY p.start_date DESC, p.id DESC
        """
        params: List[Any] = []
        if per_page:
            query += " LIMIT ? OFFSET ?"
            params = [per_page, (page - 1) * per_page]
        items = self.db.fetch_all(query, params)

        active_ids = [p.id for p in self.store.find_active()]
        classrooms = self.db.fetch_one("SELECT COUNT(*) AS total FROM classrooms")["total"]
        return {
            "items": items,
            "total": len(active_ids),
            "meta": {
                "total_slots": self.store.count_entries(active_ids),
                "total_classrooms": classrooms,
                "total_active_schedules": len(active_ids),
            },
        }

    def classrooms_without_schedule(self) -> List[Dict[str, Any]]:
        """Classrooms that have no schedule period at all"""
        self.refresh(strict=False)
        return self.db.fetch_all(
            """
            SELECT c.id, c.name, c.category, c.capacity
            FROM classrooms c
            WHERE NOT EXISTS (SELECT 1 FROM schedule_periods p WHERE p.classroom_id = c.id)
            ORDER BY c.id
            """
        )
