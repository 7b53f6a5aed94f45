"""Personal Finance Tracker package."""

__all__ = [
    "models",
    "config",
    "store",
    "analytics",
    "queries",
    "reports",
    "webapp",
    "cli",
]

__version__ = "0.1.0"
