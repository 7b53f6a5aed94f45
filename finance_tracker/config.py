"""Configuration utilities for the Personal Finance Tracker.

Provides the default category catalog and sample transactions, plus a helper
to load user-defined configuration (custom categories, seeding, logging)
from a JSON file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .models import CATEGORY_TYPES, Category


DEFAULT_CATEGORIES: List[Category] = [
    Category(id="1", name="Freelance Work", color="bg-green-500", type="income"),
    Category(id="2", name="Consulting", color="bg-emerald-500", type="income"),
    Category(id="3", name="Product Sales", color="bg-teal-500", type="income"),
    Category(id="4", name="Office Supplies", color="bg-blue-500", type="expense"),
    Category(id="5", name="Software", color="bg-indigo-500", type="expense"),
    Category(id="6", name="Marketing", color="bg-purple-500", type="expense"),
    Category(id="7", name="Travel", color="bg-pink-500", type="expense"),
    Category(id="8", name="Meals", color="bg-orange-500", type="expense"),
]

# Demo records shown on a fresh start. Newest insertion first.
SAMPLE_TRANSACTIONS: List[Dict[str, str]] = [
    {
        "id": "1",
        "title": "Website Development Project",
        "amount": "2500",
        "date": "2024-06-01",
        "category": "Freelance Work",
        "type": "income",
        "description": "Client website project completion",
    },
    {
        "id": "2",
        "title": "Adobe Creative Suite",
        "amount": "52.99",
        "date": "2024-06-01",
        "category": "Software",
        "type": "expense",
        "description": "Monthly subscription",
    },
    {
        "id": "3",
        "title": "Business Consultation",
        "amount": "800",
        "date": "2024-05-28",
        "category": "Consulting",
        "type": "income",
        "description": "Strategy consultation session",
    },
    {
        "id": "4",
        "title": "Office Chair",
        "amount": "299",
        "date": "2024-05-25",
        "category": "Office Supplies",
        "type": "expense",
        "description": "Ergonomic office chair",
    },
    {
        "id": "5",
        "title": "E-book Sales",
        "amount": "1200",
        "date": "2024-05-20",
        "category": "Product Sales",
        "type": "income",
        "description": "Digital product sales",
    },
    {
        "id": "6",
        "title": "Google Ads",
        "amount": "150",
        "date": "2024-05-15",
        "category": "Marketing",
        "type": "expense",
        "description": "Online advertising campaign",
    },
]

DEFAULT_RECENT_LIMIT = 5
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class AppConfig:
    categories: List[Category] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    seed_sample_data: bool = True
    recent_limit: int = DEFAULT_RECENT_LIMIT
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def load(config_path: Optional[str | Path] = None) -> "AppConfig":
        """Load config from JSON if provided, else use defaults.

        JSON format:
        {
          "categories": [{"id": "1", "name": "Salary", "color": "bg-green-500", "type": "income"}],
          "seed_sample_data": true,
          "recent_limit": 5,
          "log_level": "INFO"
        }
        """

        cfg = AppConfig()

        if config_path:
            p = Path(config_path)
            if p.exists():
                with p.open("r", encoding="utf-8") as f:
                    raw = json.load(f)
                if isinstance(raw, dict):
                    if isinstance(raw.get("categories"), list):
                        categories = [
                            Category(
                                id=str(c.get("id") or idx),
                                name=str(c["name"]).strip(),
                                color=str(c.get("color") or "bg-gray-500"),
                                type=str(c.get("type") or "both").lower(),
                            )
                            for idx, c in enumerate(raw["categories"], start=1)
                            if isinstance(c, dict) and c.get("name")
                        ]
                        # Drop entries with an unknown type and keep names unique
                        seen = set()
                        cfg.categories = []
                        for cat in categories:
                            if cat.type in CATEGORY_TYPES and cat.name not in seen:
                                seen.add(cat.name)
                                cfg.categories.append(cat)
                    if isinstance(raw.get("seed_sample_data"), bool):
                        cfg.seed_sample_data = raw["seed_sample_data"]
                    if isinstance(raw.get("recent_limit"), int) and raw["recent_limit"] > 0:
                        cfg.recent_limit = raw["recent_limit"]
                    if isinstance(raw.get("log_level"), str):
                        cfg.log_level = raw["log_level"].upper()
        return cfg
