"""
Menu service
Weekly menus, one active period per age category.
"""

from typing import Any, Dict, List

from ..core.exceptions import ValidationError
from ..engine.scope import MENU_SCOPE
from ..models.menu import Category
from ..models.period import Period
from .period_service import PeriodService


class MenuService(PeriodService):
    """Menu periods keyed by category"""

    scope = MENU_SCOPE

    def ensure_scope(self, scope_key: Any) -> None:
        try:
            Category(scope_key)
        except ValueError:
            allowed = ", ".join(c.value for c in Category)
            raise ValidationError(
                f"Unknown category {scope_key!r}, expected one of: {allowed}",
                details={"category": scope_key},
            )

    def list_menu_periods(self) -> List[Dict[str, Any]]:
        """Active menu periods of every category with their meal count"""
        self.refresh(strict=False)
        result = []
        for period in self.store.find_active():
            data = period.model_dump()
            data["meal_count"] = self.store.count_entries([period.id])
            result.append(data)
        return result

    def programmed_periods(self) -> List[Period]:
        """Menu periods waiting for their start date"""
        self.refresh(strict=False)
        return self.store.find_upcoming(self.clock())

    def meals_for_category(self, category: str) -> Dict[str, Any]:
        """The week of meals currently served to a category"""
        return self.weekly_view(category)
