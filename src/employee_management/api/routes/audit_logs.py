"""Audit log query endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from employee_management.api.dependencies import AdminUser, DbSession, RateLimit
from employee_management.api.schemas import AuditLogListResponse, AuditLogResponse, ErrorResponse
from employee_management.services.audit_service import AuditService
from employee_management.services.validators import parse_uuid

router = APIRouter(
    prefix="/audit-logs",
    tags=["audit"],
    dependencies=[Depends(RateLimit("general"))],
)


@router.get(
    "",
    response_model=AuditLogListResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def list_audit_logs(
    db: DbSession,
    admin: AdminUser,
    table_name: str | None = None,
    record_id: str | None = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> AuditLogListResponse:
    """Newest audit entries first."""
    entries = await AuditService(db).list_entries(
        table_name=table_name,
        record_id=parse_uuid(record_id, "record_id") if record_id else None,
        limit=limit,
    )
    return AuditLogListResponse(
        audit_logs=[AuditLogResponse.model_validate(e) for e in entries]
    )
