"""Audit trail writer and reader."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management.models import AuditLog


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CALCULATE = "CALCULATE"
    FINALIZE = "FINALIZE"
    RESET = "RESET"


@dataclass(frozen=True)
class RequestContext:
    """Who is acting and from where."""

    user_id: UUID | None = None
    ip_address: str | None = None
    user_agent: str | None = None


def _jsonable(values: Mapping[str, Any] | None) -> dict[str, Any] | None:
    # Decimals, UUIDs and datetimes become strings
    if values is None:
        return None
    return json.loads(json.dumps(dict(values), default=str))


class AuditService:
    """Records mutations in ``audit_logs`` within the caller's transaction."""

    def __init__(self, session: AsyncSession, context: RequestContext | None = None):
        self.session = session
        self.context = context or RequestContext()

    async def record(
        self,
        action: AuditAction,
        table_name: str,
        record_id: UUID | None,
        *,
        old_values: Mapping[str, Any] | None = None,
        new_values: Mapping[str, Any] | None = None,
        description: str | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            user_id=self.context.user_id,
            action=action.value,
            table_name=table_name,
            record_id=record_id,
            old_values=_jsonable(old_values),
            new_values=_jsonable(new_values),
            description=description,
            ip_address=self.context.ip_address,
            user_agent=self.context.user_agent,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_entries(
        self,
        table_name: str | None = None,
        record_id: UUID | None = None,
        limit: int = 50,
    ) -> list[AuditLog]:
        """Newest entries first, optionally filtered by table/record."""
        query = select(AuditLog)
        if table_name:
            query = query.where(AuditLog.table_name == table_name)
        if record_id:
            query = query.where(AuditLog.record_id == record_id)
        query = query.order_by(AuditLog.created_at.desc()).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
