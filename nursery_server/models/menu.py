"""
Menu meal models
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .base import BaseEntity, DayOfWeek


class MealType(str, Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    GOUTER = "Gouter"  # afternoon snack


class Category(str, Enum):
    """Age categories a menu is planned for"""
    BEBE = "BEBE"
    PETIT = "PETIT"
    MOYEN = "MOYEN"
    GRAND = "GRAND"


# Course fields, grouped by the meal types that use them
LIGHT_MEAL_FIELDS = ("drink", "snack")
FULL_MEAL_FIELDS = ("starter", "main_course", "side_dish", "dessert", "drink")
COURSE_FIELDS = ("starter", "main_course", "side_dish", "dessert")


class MenuMealIn(BaseModel):
    """Meal as submitted in a batch"""

    model_config = {"use_enum_values": True}

    day_of_week: DayOfWeek
    meal_type: MealType
    starter: Optional[str] = Field(None, max_length=200)
    main_course: Optional[str] = Field(None, max_length=200)
    side_dish: Optional[str] = Field(None, max_length=200)
    dessert: Optional[str] = Field(None, max_length=200)
    drink: Optional[str] = Field(None, max_length=200)
    snack: Optional[str] = Field(None, max_length=200)
    special_note: Optional[str] = Field(None, max_length=500)


class MenuMeal(MenuMealIn, BaseEntity):
    """Stored meal"""
    id: int
    menu_period_id: int
