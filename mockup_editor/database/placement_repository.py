"""Placement repository — SQLite-backed data service.

Persists fine-tuned placements, processed image references and whole
product placement states. All SQL operates against the schema defined in
``db_manager.py``. The async methods satisfy the DataService contract;
SQLite calls are short and run inline on the event loop.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime

from mockup_editor.core.serializers import (
    dict_to_placement,
    placement_to_dict,
)
from mockup_editor.database.db_manager import DatabaseManager
from mockup_editor.models.placement import Placement

logger = logging.getLogger(__name__)


class PlacementRepository:
    """Data service over a local SQLite database."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    # ------------------------------------------------------------------
    # DataService
    # ------------------------------------------------------------------

    async def persist_placement(self, design_id: str, placement: Placement) -> bool:
        """Upsert the placement of *design_id*."""
        self.save_placement(design_id, placement)
        return True

    async def persist_processed_image(self, design_id: str, image_reference: str) -> bool:
        """Upsert the processed image reference of *design_id*."""
        conn = self._db.connect()
        conn.execute(
            """INSERT OR REPLACE INTO processed_images
               (design_id, image_reference, updated_at)
               VALUES (?, ?, ?)""",
            (design_id, image_reference, datetime.now().isoformat()),
        )
        conn.commit()
        logger.info("Stored processed image for design %s", design_id)
        return True

    async def persist_product_state(self, product_id: str, state: dict) -> bool:
        """Upsert the serialized (color, view) state of *product_id*."""
        conn = self._db.connect()
        conn.execute(
            """INSERT OR REPLACE INTO product_states
               (product_id, state_json, updated_at)
               VALUES (?, ?, ?)""",
            (product_id, json.dumps(state, ensure_ascii=False),
             datetime.now().isoformat()),
        )
        conn.commit()
        logger.info("Stored placement state for product %s", product_id)
        return True

    # ------------------------------------------------------------------
    # Placements
    # ------------------------------------------------------------------

    def save_placement(self, design_id: str, placement: Placement) -> None:
        conn = self._db.connect()
        conn.execute(
            """INSERT OR REPLACE INTO design_placements
               (design_id, placement_json, updated_at)
               VALUES (?, ?, ?)""",
            (design_id, json.dumps(placement_to_dict(placement)),
             datetime.now().isoformat()),
        )
        conn.commit()

    def load_placement(self, design_id: str) -> Placement:
        """Load the stored placement for a design."""
        conn = self._db.connect()
        row = conn.execute(
            "SELECT placement_json FROM design_placements WHERE design_id = ?",
            (design_id,),
        ).fetchone()
        if row is None:
            raise KeyError(f"Placement not found: {design_id}")
        return dict_to_placement(json.loads(row[0]))

    def load_processed_image(self, design_id: str) -> str | None:
        conn = self._db.connect()
        row = conn.execute(
            "SELECT image_reference FROM processed_images WHERE design_id = ?",
            (design_id,),
        ).fetchone()
        return row[0] if row else None

    def load_product_state(self, product_id: str) -> dict:
        """Load the serialized placement state for a product."""
        conn = self._db.connect()
        row = conn.execute(
            "SELECT state_json FROM product_states WHERE product_id = ?",
            (product_id,),
        ).fetchone()
        if row is None:
            raise KeyError(f"Product state not found: {product_id}")
        return json.loads(row[0])

    def delete_product_state(self, product_id: str) -> None:
        conn = self._db.connect()
        conn.execute("DELETE FROM product_states WHERE product_id = ?", (product_id,))
        conn.commit()

    # ------------------------------------------------------------------
    # App Settings
    # ------------------------------------------------------------------

    def get_setting(self, key: str, default: str | None = None) -> str | None:
        """Get an application setting."""
        conn = self._db.connect()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else default

    def set_setting(self, key: str, value: str) -> None:
        """Set an application setting (upsert)."""
        conn = self._db.connect()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings (key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()
