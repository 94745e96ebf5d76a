"""Employee raw material catalogue and usage logging."""

from fastapi import APIRouter, Depends, status

from employee_management import messages
from employee_management.api.dependencies import CurrentUser, DbSession, RateLimit
from employee_management.api.schemas import (
    CurrentMaterialUsageResponse,
    ErrorResponse,
    MaterialUsageCostedRecord,
    MaterialUsageCreate,
    MaterialUsageCreateResponse,
    MaterialUsageRecord,
    RawMaterialListResponse,
    RawMaterialSummary,
)
from employee_management.services.material_usage_service import (
    MaterialUsageService,
    UsageItem,
    UsageRecord,
)

router = APIRouter(
    tags=["material-usage"],
    dependencies=[Depends(RateLimit("auth"))],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)


def _record(record: UsageRecord) -> MaterialUsageRecord:
    usage = record.usage
    return MaterialUsageRecord(
        id=usage.id,
        time_entry_id=usage.time_entry_id,
        material=RawMaterialSummary.model_validate(record.material),
        quantity_used=usage.quantity_used,
        created_at=usage.created_at,
    )


def _costed_record(record: UsageRecord) -> MaterialUsageCostedRecord:
    return MaterialUsageCostedRecord(
        **_record(record).model_dump(),
        unit_cost=record.usage.unit_cost,
        total_cost=record.usage.total_cost,
    )


@router.get("/raw-materials", response_model=RawMaterialListResponse)
async def list_raw_materials(db: DbSession, user: CurrentUser) -> RawMaterialListResponse:
    materials = await MaterialUsageService(db).list_materials(user)
    return RawMaterialListResponse(
        raw_materials=[RawMaterialSummary.model_validate(m) for m in materials]
    )


@router.post(
    "/material-usage",
    response_model=MaterialUsageCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_material_usage(
    db: DbSession,
    user: CurrentUser,
    payload: MaterialUsageCreate,
) -> MaterialUsageCreateResponse:
    """Log materials used in the open work session."""
    usage = await MaterialUsageService(db).record(
        user,
        [UsageItem(item.material_id, item.quantity_used) for item in payload.materials],
    )
    await db.commit()
    return MaterialUsageCreateResponse(
        time_entry_id=usage.time_entry.id,
        records=[_costed_record(r) for r in usage.records],
    )


@router.get("/material-usage/current", response_model=CurrentMaterialUsageResponse)
async def current_material_usage(
    db: DbSession, user: CurrentUser
) -> CurrentMaterialUsageResponse:
    usage = await MaterialUsageService(db).current(user)
    if not usage.has_active_session:
        return CurrentMaterialUsageResponse(
            has_active_session=False, message=messages.NO_ACTIVE_SESSION
        )
    return CurrentMaterialUsageResponse(
        has_active_session=True,
        time_entry_id=usage.time_entry.id,
        records=[_record(r) for r in usage.records],
        can_add_materials=True,
    )
