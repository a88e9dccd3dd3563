"""Macro tracker API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, HTTPException, Query, Request, status

from macro_tracker.api.models import LogNutritionRequest
from macro_tracker.errors import ExtractionError
from macro_tracker.services.nutrition_log import today

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer

router = APIRouter(prefix="/macro-tracker/api", tags=["macro-tracker"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/summary")
async def get_summary(request: Request, date: str | None = None) -> dict[str, object]:
    """Return the day summary for a date, defaulting to today."""
    container = _container(request)
    return container.summary_service.get_daily_summary(date or today()).as_dict()


@router.get("/entries")
async def list_entries(
    request: Request,
    from_date: str | None = Query(default=None, alias="from"),
    to_date: str | None = Query(default=None, alias="to"),
) -> dict[str, object]:
    """Return entries between two dates, both inclusive."""
    if not from_date or not to_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both 'from' and 'to' query parameters are required",
        )
    entries = _container(request).ledger_service.get_entries_by_date_range(
        from_date, to_date
    )
    return {"entries": [entry.as_dict() for entry in entries]}


@router.post("/entries")
async def log_entry(
    payload: LogNutritionRequest, request: Request
) -> dict[str, object]:
    """Extract items from a description and log them as an entry."""
    service = _container(request).nutrition_log_service
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Nutrition extraction is not configured",
        )
    try:
        logged = await service.log(payload.description, payload.date, payload.source)
    except ExtractionError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc
    return {
        "entry": logged.entry.as_dict(),
        "daily_summary": logged.daily_summary.as_dict(),
    }


@router.delete("/entries/{entry_id}")
async def delete_entry(entry_id: str, request: Request) -> dict[str, object]:
    """Delete an entry and return its snapshot."""
    ledger = _container(request).ledger_service
    entry = ledger.get_entry(entry_id)
    if entry is None or not ledger.delete_entry(entry_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found"
        )
    return {"deleted": True, "entry": entry.as_dict()}


@router.get("/goals")
async def get_goals(request: Request) -> dict[str, object]:
    """Return the current goals, or null when unset."""
    goals = _container(request).goals_service.get_goals()
    return {"goals": goals.as_dict() if goals else None}


@router.put("/goals")
async def update_goals(
    request: Request, payload: dict[str, Any] = Body(...)
) -> dict[str, object]:
    """Update any subset of the goal values."""
    goals = _container(request).goals_service.update_goals(payload)
    return {"goals": goals.as_dict()}
