"""Saved scenario routes."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from morty.api.deps import get_store
from morty.api.routes.schedule import build_schedule_response
from morty.api.schemas import (
    LoanParametersSchema,
    ScenarioCreate,
    ScenarioResponse,
    ScenarioUpdate,
    ScheduleResponse,
)
from morty.data.scenario_store import ScenarioNotFoundError, ScenarioStorageError, ScenarioStore
from morty.models.scenario import SavedScenario

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/scenarios", tags=["scenarios"])


def _to_response(scenario: SavedScenario) -> ScenarioResponse:
    return ScenarioResponse(
        id=scenario.id,
        saved_at=scenario.saved_at,
        title=scenario.title,
        display_title=scenario.display_title,
        address=scenario.address,
        notes=scenario.notes,
        image_url=scenario.image_url,
        listing_url=scenario.listing_url,
        params=LoanParametersSchema.from_params(scenario.params),
    )


def _load(store: ScenarioStore, scenario_id: UUID) -> SavedScenario:
    try:
        scenario = store.get(scenario_id)
    except ScenarioStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if scenario is None:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return scenario


@router.post("", response_model=ScenarioResponse, status_code=201)
async def save_scenario(req: ScenarioCreate, store: ScenarioStore = Depends(get_store)):
    try:
        scenario = store.save(
            req.params.to_params(),
            title=req.title,
            address=req.address,
            notes=req.notes,
            image_url=req.image_url,
            listing_url=req.listing_url,
        )
    except ScenarioStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _to_response(scenario)


@router.get("", response_model=list[ScenarioResponse])
async def list_scenarios(store: ScenarioStore = Depends(get_store)):
    """All saved scenarios, newest first."""
    try:
        scenarios = store.list_all()
    except ScenarioStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return [_to_response(s) for s in scenarios]


@router.delete("", status_code=204)
async def clear_scenarios(store: ScenarioStore = Depends(get_store)):
    try:
        removed = store.clear()
    except ScenarioStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    logger.info("Cleared %d scenarios via API", removed)


@router.get("/{scenario_id}", response_model=ScenarioResponse)
async def get_scenario(scenario_id: UUID, store: ScenarioStore = Depends(get_store)):
    return _to_response(_load(store, scenario_id))


@router.put("/{scenario_id}", response_model=ScenarioResponse)
async def update_scenario(
    scenario_id: UUID,
    req: ScenarioUpdate,
    store: ScenarioStore = Depends(get_store),
):
    """Replace a scenario's parameters; metadata fields left out are kept."""
    metadata = req.model_dump(exclude={"params"}, exclude_none=True)
    try:
        scenario = store.update(scenario_id, req.params.to_params(), **metadata)
    except ScenarioNotFoundError:
        raise HTTPException(status_code=404, detail="Scenario not found")
    except ScenarioStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _to_response(scenario)


@router.delete("/{scenario_id}", status_code=204)
async def delete_scenario(scenario_id: UUID, store: ScenarioStore = Depends(get_store)):
    try:
        deleted = store.delete(scenario_id)
    except ScenarioStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Scenario not found")


@router.get("/{scenario_id}/schedule", response_model=ScheduleResponse)
async def scenario_schedule(scenario_id: UUID, store: ScenarioStore = Depends(get_store)):
    """Run the calculator on a saved scenario, unmodified."""
    return build_schedule_response(_load(store, scenario_id).params)
