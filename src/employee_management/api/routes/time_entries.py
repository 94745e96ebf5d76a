"""Employee time entry endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from employee_management import messages
from employee_management.api.dependencies import CurrentUser, DbSession, RateLimit, get_app_settings
from employee_management.api.schemas import (
    CheckInRequest,
    CheckOutRequest,
    ErrorResponse,
    TimeEntryActionResponse,
    TimeEntryResponse,
    TimeEntryStatusResponse,
)
from employee_management.config import Settings
from employee_management.services.time_entry_service import TimeEntryResult, TimeEntryService

router = APIRouter(
    prefix="/time-entries",
    tags=["time-entries"],
    dependencies=[Depends(RateLimit("general"))],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)

AppSettings = Annotated[Settings, Depends(get_app_settings)]


def _action_response(message: str, result: TimeEntryResult) -> TimeEntryActionResponse:
    return TimeEntryActionResponse(
        message=message,
        time_entry=TimeEntryResponse.model_validate(result.entry),
        branch_name=result.branch.name,
        distance_meters=round(result.distance_meters, 2),
    )


@router.post("/check-in", response_model=TimeEntryActionResponse)
async def check_in(
    db: DbSession,
    user: CurrentUser,
    settings: AppSettings,
    payload: CheckInRequest,
) -> TimeEntryActionResponse:
    """Start a work session at a branch, within the allowed GPS radius."""
    service = TimeEntryService(db, settings.max_checkin_distance_meters)
    result = await service.check_in(
        user, payload.branch_id, payload.latitude, payload.longitude, payload.selfie_url
    )
    await db.commit()
    return _action_response(messages.CHECKED_IN, result)


@router.post("/check-out", response_model=TimeEntryActionResponse)
async def check_out(
    db: DbSession,
    user: CurrentUser,
    settings: AppSettings,
    payload: CheckOutRequest,
) -> TimeEntryActionResponse:
    """Close the open work session."""
    service = TimeEntryService(db, settings.max_checkin_distance_meters)
    result = await service.check_out(
        user, payload.latitude, payload.longitude, payload.selfie_url
    )
    await db.commit()
    return _action_response(messages.CHECKED_OUT, result)


@router.get("/status", response_model=TimeEntryStatusResponse)
async def check_in_status(db: DbSession, user: CurrentUser) -> TimeEntryStatusResponse:
    entry = await TimeEntryService(db).get_open_entry(user.id)
    return TimeEntryStatusResponse(
        is_checked_in=entry is not None,
        time_entry=TimeEntryResponse.model_validate(entry) if entry else None,
    )
