"""Meal categories and the fast-breaking policy table."""

from dataclasses import dataclass, field
from enum import StrEnum


class MealCategory(StrEnum):
    """Kinds of intake a user can log."""

    WATER = "water"
    FRUIT = "fruit"
    LIGHT_MEAL = "light_meal"
    MEDIUM_MEAL = "medium_meal"
    HEAVY_MEAL = "heavy_meal"
    FAST_FOOD = "fast_food"
    DRINK = "drink"


@dataclass(frozen=True)
class CategoryConfig:
    """Display and analytics metadata for a category."""

    id: MealCategory
    label: str
    description: str
    order: int
    group: str
    weight: float
    recommended_gap_hours: float


MEAL_CATEGORIES: dict[MealCategory, CategoryConfig] = {
    MealCategory.WATER: CategoryConfig(
        id=MealCategory.WATER,
        label="Water",
        description="Plain water, hydration",
        order=1,
        group="liquids",
        weight=0.1,
        recommended_gap_hours=0.5,
    ),
    MealCategory.FRUIT: CategoryConfig(
        id=MealCategory.FRUIT,
        label="Fruit",
        description="Fresh fruits, natural sugars",
        order=2,
        group="light",
        weight=0.3,
        recommended_gap_hours=2.0,
    ),
    MealCategory.LIGHT_MEAL: CategoryConfig(
        id=MealCategory.LIGHT_MEAL,
        label="Light Meal",
        description="Salads, light snacks, vegetables",
        order=3,
        group="light",
        weight=0.5,
        recommended_gap_hours=3.0,
    ),
    MealCategory.MEDIUM_MEAL: CategoryConfig(
        id=MealCategory.MEDIUM_MEAL,
        label="Medium Meal",
        description="Balanced meals, moderate portions",
        order=4,
        group="substantial",
        weight=0.8,
        recommended_gap_hours=4.0,
    ),
    MealCategory.HEAVY_MEAL: CategoryConfig(
        id=MealCategory.HEAVY_MEAL,
        label="Heavy Meal",
        description="Large meals, high protein/fat content",
        order=5,
        group="substantial",
        weight=1.0,
        recommended_gap_hours=5.0,
    ),
    MealCategory.FAST_FOOD: CategoryConfig(
        id=MealCategory.FAST_FOOD,
        label="Fast Food",
        description="Processed foods, takeout, junk food",
        order=6,
        group="substantial",
        weight=1.2,
        recommended_gap_hours=5.5,
    ),
    MealCategory.DRINK: CategoryConfig(
        id=MealCategory.DRINK,
        label="Drink",
        description="Coffee, tea, juices, other beverages",
        order=7,
        group="liquids",
        weight=0.2,
        recommended_gap_hours=1.0,
    ),
}

# Drinks count as fast-breaking (coffee with milk, juices). Only plain water does not.
FASTING_BREAKING_CATEGORIES: frozenset[MealCategory] = frozenset(
    {
        MealCategory.FRUIT,
        MealCategory.LIGHT_MEAL,
        MealCategory.MEDIUM_MEAL,
        MealCategory.HEAVY_MEAL,
        MealCategory.FAST_FOOD,
        MealCategory.DRINK,
    }
)


@dataclass(frozen=True)
class FastingPolicy:
    """Classification of which categories end a fast."""

    breaking_categories: frozenset[MealCategory] = field(
        default=FASTING_BREAKING_CATEGORIES
    )

    def breaks_fast(self, category: MealCategory | str) -> bool:
        """Return True when an intake of this category ends a fast."""
        try:
            resolved = MealCategory(category)
        except ValueError:
            return False
        return resolved in self.breaking_categories


DEFAULT_FASTING_POLICY = FastingPolicy()


def get_category_config(category: MealCategory | str) -> CategoryConfig:
    """Return metadata for a category."""
    return MEAL_CATEGORIES[MealCategory(category)]


def sorted_categories() -> list[CategoryConfig]:
    """Return categories in display order."""
    return sorted(MEAL_CATEGORIES.values(), key=lambda config: config.order)


def is_valid_category(value: str) -> bool:
    """Return True when the value names a known category."""
    return value in MealCategory._value2member_map_
