"""Raw material usage logged against an open work session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management import messages
from employee_management.calculators.net_pay import to_money
from employee_management.errors import AuthorizationError, ValidationError
from employee_management.models import MaterialUsage, RawMaterial, TimeEntry, User
from employee_management.services.time_entry_service import TimeEntryService
from employee_management.services.validators import MAX_AMOUNT

logger = logging.getLogger(__name__)

# Numeric(12, 3) column
MAX_QUANTITY = Decimal("999999999.999")


@dataclass(frozen=True)
class UsageItem:
    material_id: UUID
    quantity_used: Decimal


@dataclass
class UsageRecord:
    usage: MaterialUsage
    material: RawMaterial


@dataclass
class SessionUsage:
    time_entry: TimeEntry | None
    records: list[UsageRecord] = field(default_factory=list)

    @property
    def has_active_session(self) -> bool:
        return self.time_entry is not None


class MaterialUsageService:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _ensure_employee(self, user: User) -> None:
        if user.role != "employee":
            raise AuthorizationError(messages.EMPLOYEE_ACCESS_REQUIRED, code="EMPLOYEE_ONLY")

    async def list_materials(self, user: User) -> list[RawMaterial]:
        self._ensure_employee(user)
        result = await self.session.execute(
            select(RawMaterial).where(RawMaterial.is_active.is_(True)).order_by(RawMaterial.name)
        )
        return list(result.scalars().all())

    async def record(self, user: User, items: Iterable[UsageItem]) -> SessionUsage:
        """Log materials used during the user's open session at current catalogue cost."""
        self._ensure_employee(user)
        items = list(items)
        if not items:
            raise ValidationError(messages.MATERIALS_REQUIRED, code="MATERIALS_REQUIRED")
        for item in items:
            quantity = item.quantity_used
            if not quantity.is_finite() or quantity <= 0 or quantity > MAX_QUANTITY:
                raise ValidationError(
                    messages.MATERIAL_QUANTITY_INVALID,
                    code="INVALID_QUANTITY",
                    context={"material_id": item.material_id},
                )

        entry = await TimeEntryService(self.session).get_open_entry(user.id)
        if entry is None:
            raise ValidationError(messages.MATERIAL_CHECK_IN_REQUIRED, code="CHECK_IN_REQUIRED")

        material_ids = {item.material_id for item in items}
        result = await self.session.execute(
            select(RawMaterial).where(RawMaterial.id.in_(material_ids))
        )
        materials = {material.id: material for material in result.scalars().all()}
        missing = material_ids - materials.keys()
        if missing:
            raise ValidationError(
                messages.MATERIAL_NOT_FOUND,
                code="MATERIAL_NOT_FOUND",
                context={"material_ids": sorted(str(m) for m in missing)},
            )

        records = []
        for item in items:
            material = materials[item.material_id]
            unit_cost = to_money(material.cost_per_unit or 0)
            total_cost = to_money(item.quantity_used * unit_cost)
            if total_cost > MAX_AMOUNT:
                raise ValidationError(
                    messages.AMOUNT_TOO_LARGE,
                    code="INVALID_AMOUNT",
                    context={"material_id": material.id},
                )
            usage = MaterialUsage(
                time_entry_id=entry.id,
                material_id=material.id,
                quantity_used=item.quantity_used,
                unit_cost=unit_cost,
                total_cost=total_cost,
            )
            self.session.add(usage)
            records.append(UsageRecord(usage, material))
        await self.session.flush()

        logger.info(
            "User %s logged %d material usage records on time entry %s",
            user.id,
            len(records),
            entry.id,
        )
        return SessionUsage(entry, records)

    async def current(self, user: User) -> SessionUsage:
        """Usage already logged in the user's open session, oldest first."""
        self._ensure_employee(user)
        entry = await TimeEntryService(self.session).get_open_entry(user.id)
        if entry is None:
            return SessionUsage(None)

        result = await self.session.execute(
            select(MaterialUsage, RawMaterial)
            .join(RawMaterial, RawMaterial.id == MaterialUsage.material_id)
            .where(MaterialUsage.time_entry_id == entry.id)
            .order_by(MaterialUsage.created_at)
        )
        return SessionUsage(entry, [UsageRecord(usage, material) for usage, material in result.all()])
