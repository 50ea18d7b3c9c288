"""FastAPI dependency injection."""

from fastapi import HTTPException

from morty.config import settings
from morty.data.scenario_store import ScenarioStorageError, ScenarioStore


def get_store() -> ScenarioStore:
    try:
        return ScenarioStore(settings.scenario_db_path)
    except ScenarioStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
