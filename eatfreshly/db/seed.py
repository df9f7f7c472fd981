"""Database seeding helpers."""

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eatfreshly.core.config import settings
from eatfreshly.models.menu import MenuItem

logger = logging.getLogger(__name__)

DEMO_MENU: list[dict] = [
    {
        "name": "Crispy Corn Chaat",
        "category": "Starters",
        "description": "Golden fried sweet corn tossed with onion, lime and chaat masala.",
        "price": Decimal("149.00"),
        "ingredients": ["sweet corn", "onion", "lime", "chaat masala"],
        "is_vegetarian": True,
        "is_vegan": True,
        "preparation_time": 10,
    },
    {
        "name": "Paneer Tikka",
        "category": "Starters",
        "description": "Char-grilled cottage cheese marinated in hung curd and spices.",
        "price": Decimal("249.00"),
        "ingredients": ["paneer", "curd", "bell pepper", "spices"],
        "is_vegetarian": True,
        "is_gluten_free": True,
        "is_signature": True,
        "preparation_time": 20,
    },
    {
        "name": "Butter Chicken Bowl",
        "category": "Main Course",
        "description": "Slow-cooked chicken in tomato butter gravy over jeera rice.",
        "price": Decimal("329.00"),
        "ingredients": ["chicken", "tomato", "butter", "rice"],
        "is_gluten_free": True,
        "is_signature": True,
        "preparation_time": 25,
        "nutritional_info": {"calories": 720, "protein": 38, "carbs": 70, "fat": 30, "fiber": 4},
    },
    {
        "name": "Rajma Chawal",
        "category": "Main Course",
        "description": "Kidney bean curry simmered with whole spices, served with basmati.",
        "price": Decimal("219.00"),
        "ingredients": ["kidney beans", "basmati rice", "onion", "tomato"],
        "is_vegetarian": True,
        "is_vegan": True,
        "is_gluten_free": True,
        "preparation_time": 20,
    },
    {
        "name": "Quinoa Garden Salad",
        "category": "Salads",
        "description": "Quinoa, cucumber, cherry tomato and greens with lemon herb dressing.",
        "price": Decimal("199.00"),
        "ingredients": ["quinoa", "cucumber", "cherry tomato", "greens"],
        "is_vegetarian": True,
        "is_vegan": True,
        "is_gluten_free": True,
        "preparation_time": 10,
    },
    {
        "name": "Mango Lassi",
        "category": "Drinks",
        "description": "Chilled yoghurt smoothie blended with Alphonso mango.",
        "price": Decimal("99.00"),
        "ingredients": ["yoghurt", "mango", "sugar"],
        "is_vegetarian": True,
        "is_gluten_free": True,
        "preparation_time": 5,
    },
    {
        "name": "Gulab Jamun",
        "category": "Desserts",
        "description": "Soft milk dumplings soaked in cardamom sugar syrup.",
        "price": Decimal("119.00"),
        "discounted_price": Decimal("99.00"),
        "ingredients": ["khoya", "sugar", "cardamom"],
        "is_vegetarian": True,
        "preparation_time": 5,
    },
]


def seed_demo_menu(session: Session) -> int:
    """Insert the demo menu into an empty menu table; returns rows added."""
    if not settings.seed_demo_data:
        return 0
    if (session.scalar(select(func.count(MenuItem.id))) or 0) > 0:
        return 0

    for entry in DEMO_MENU:
        session.add(MenuItem(**entry))
    session.commit()
    logger.info("[BOOTSTRAP] Seeded %s demo menu items", len(DEMO_MENU))
    return len(DEMO_MENU)
