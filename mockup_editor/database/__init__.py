"""Database layer — SQLite connection, schema, and the placement repository."""

from mockup_editor.database.db_manager import DatabaseManager
from mockup_editor.database.placement_repository import PlacementRepository

__all__ = [
    "DatabaseManager",
    "PlacementRepository",
]
