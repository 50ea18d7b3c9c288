"""SQLite-backed storage for saved mortgage scenarios."""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID, uuid4

from morty.data.serialization import params_from_dict, params_to_dict
from morty.models.loan import LoanParameters
from morty.models.scenario import SavedScenario

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("title", "address", "notes", "image_url", "listing_url")


class ScenarioStorageError(Exception):
    """Storage was unavailable or rejected the write. Message is user-facing."""


class ScenarioNotFoundError(ScenarioStorageError):
    pass


class ScenarioStore:
    def __init__(self, db_path: str = "data/scenarios.db"):
        self.db_path = db_path
        try:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self._ensure_tables()
        except (OSError, sqlite3.Error) as e:
            logger.error("Error opening scenario database %s: %s", db_path, e)
            raise ScenarioStorageError("Scenario storage is unavailable") from e

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS scenarios (
                    id TEXT PRIMARY KEY,
                    saved_at TIMESTAMP,
                    title TEXT DEFAULT '',
                    address TEXT DEFAULT '',
                    notes TEXT DEFAULT '',
                    image_url TEXT DEFAULT '',
                    listing_url TEXT DEFAULT '',
                    params_json TEXT
                );
            """)

    @staticmethod
    def _row_to_scenario(row: sqlite3.Row) -> SavedScenario:
        return SavedScenario(
            id=UUID(row["id"]),
            saved_at=datetime.fromisoformat(row["saved_at"]),
            params=params_from_dict(json.loads(row["params_json"])),
            title=row["title"] or "",
            address=row["address"] or "",
            notes=row["notes"] or "",
            image_url=row["image_url"] or "",
            listing_url=row["listing_url"] or "",
        )

    def save(
        self,
        params: LoanParameters,
        title: str = "",
        address: str = "",
        notes: str = "",
        image_url: str = "",
        listing_url: str = "",
    ) -> SavedScenario:
        """Store a new scenario and return it with its generated id."""
        scenario = SavedScenario(
            id=uuid4(),
            saved_at=datetime.now(timezone.utc),
            params=params,
            title=title,
            address=address,
            notes=notes,
            image_url=image_url,
            listing_url=listing_url,
        )
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO scenarios "
                    "(id, saved_at, title, address, notes, image_url, listing_url, params_json) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        str(scenario.id),
                        scenario.saved_at.isoformat(),
                        title,
                        address,
                        notes,
                        image_url,
                        listing_url,
                        json.dumps(params_to_dict(params)),
                    ),
                )
        except sqlite3.Error as e:
            logger.error("Error saving scenario: %s", e)
            raise ScenarioStorageError("Failed to save scenario") from e

        logger.info("Saved scenario %s (%s)", scenario.id, scenario.display_title)
        return scenario

    def get(self, scenario_id: UUID) -> SavedScenario | None:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM scenarios WHERE id = ?", (str(scenario_id),)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error("Error reading scenario %s: %s", scenario_id, e)
            raise ScenarioStorageError("Failed to load scenario") from e
        if row is None:
            return None
        try:
            return self._row_to_scenario(row)
        except (ValueError, TypeError) as e:
            logger.warning("Unreadable scenario %s: %s", scenario_id, e)
            raise ScenarioStorageError("Saved scenario is unreadable") from e

    def list_all(self) -> list[SavedScenario]:
        """All saved scenarios, newest first. Unreadable rows are skipped."""
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT * FROM scenarios ORDER BY saved_at DESC, rowid DESC"
                ).fetchall()
        except sqlite3.Error as e:
            logger.error("Error reading saved scenarios: %s", e)
            raise ScenarioStorageError("Failed to load saved scenarios") from e

        scenarios: list[SavedScenario] = []
        for row in rows:
            try:
                scenarios.append(self._row_to_scenario(row))
            except (ValueError, TypeError) as e:
                logger.warning("Skipping unreadable scenario %s: %s", row["id"], e)
        return scenarios

    def update(self, scenario_id: UUID, params: LoanParameters, **metadata: str) -> SavedScenario:
        """Replace a scenario's parameters (and any metadata fields given).

        Keeps the original id and save timestamp.
        """
        unknown = set(metadata) - set(METADATA_FIELDS)
        if unknown:
            raise ValueError(f"Unknown scenario fields: {', '.join(sorted(unknown))}")

        existing = self.get(scenario_id)
        if existing is None:
            raise ScenarioNotFoundError("Scenario not found")

        fields = {name: getattr(existing, name) for name in METADATA_FIELDS}
        fields.update(metadata)
        try:
            with self._connect() as conn:
                conn.execute(
                    "UPDATE scenarios SET title = ?, address = ?, notes = ?, image_url = ?, "
                    "listing_url = ?, params_json = ? WHERE id = ?",
                    (
                        fields["title"],
                        fields["address"],
                        fields["notes"],
                        fields["image_url"],
                        fields["listing_url"],
                        json.dumps(params_to_dict(params)),
                        str(scenario_id),
                    ),
                )
        except sqlite3.Error as e:
            logger.error("Error updating scenario %s: %s", scenario_id, e)
            raise ScenarioStorageError("Failed to update scenario") from e

        return SavedScenario(id=existing.id, saved_at=existing.saved_at, params=params, **fields)

    def delete(self, scenario_id: UUID) -> bool:
        """Remove a scenario. Returns False if it did not exist."""
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM scenarios WHERE id = ?", (str(scenario_id),))
        except sqlite3.Error as e:
            logger.error("Error deleting scenario %s: %s", scenario_id, e)
            raise ScenarioStorageError("Failed to delete scenario") from e
        logger.debug("Deleted scenario %s (rows=%d)", scenario_id, cursor.rowcount)
        return cursor.rowcount > 0

    def clear(self) -> int:
        """Remove every saved scenario. Returns how many were removed."""
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM scenarios")
        except sqlite3.Error as e:
            logger.error("Error clearing saved scenarios: %s", e)
            raise ScenarioStorageError("Failed to clear scenarios") from e
        logger.info("Cleared %d saved scenarios", cursor.rowcount)
        return cursor.rowcount
