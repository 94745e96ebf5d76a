"""Employee check-in / check-out with GPS and selfie verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_management import messages
from employee_management.calculators.base_pay import WorkSession
from employee_management.calculators.net_pay import to_money
from employee_management.errors import AuthorizationError, NotFoundError, StateError, ValidationError
from employee_management.models import Branch, TimeEntry, User, utcnow
from employee_management.services.location import is_within_radius
from employee_management.services.validators import validate_coordinates

logger = logging.getLogger(__name__)


@dataclass
class TimeEntryResult:
    entry: TimeEntry
    branch: Branch
    distance_meters: float


def selfie_belongs_to(selfie_url: str, user_id: UUID, action: str) -> bool:
    """Selfie uploads live under ``/{checkin|checkout}/{user_id}/``."""
    return f"/{action}/{user_id}/" in selfie_url


class TimeEntryService:
    def __init__(self, session: AsyncSession, max_distance_meters: float = 100.0):
        self.session = session
        self.max_distance_meters = max_distance_meters

    async def get_open_entry(self, user_id: UUID) -> TimeEntry | None:
        result = await self.session.execute(
            select(TimeEntry)
            .where(TimeEntry.user_id == user_id, TimeEntry.check_out_time.is_(None))
            .order_by(TimeEntry.check_in_time.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    def _ensure_employee(self, user: User) -> None:
        if user.role != "employee":
            raise AuthorizationError(messages.EMPLOYEE_REQUIRED, code="EMPLOYEE_ONLY")

    def _ensure_selfie(self, user: User, selfie_url: str | None, action: str) -> None:
        if selfie_url and not selfie_belongs_to(selfie_url, user.id, action):
            logger.warning("User %s submitted a selfie outside their folder", user.id)
            raise AuthorizationError(messages.SELFIE_NOT_OWNED, code="SELFIE_NOT_OWNED")

    def _ensure_near(self, branch: Branch, latitude: float, longitude: float) -> float:
        validate_coordinates(latitude, longitude)
        within, distance = is_within_radius(
            latitude, longitude, branch.latitude, branch.longitude, self.max_distance_meters
        )
        if not within:
            logger.warning(
                "Rejected GPS position %.0fm from branch %s", distance, branch.id
            )
            raise ValidationError(
                messages.TOO_FAR_FROM_BRANCH.format(
                    max_distance=self.max_distance_meters, distance=distance
                ),
                code="TOO_FAR_FROM_BRANCH",
                context={
                    "distance_meters": round(distance, 2),
                    "max_distance_meters": self.max_distance_meters,
                },
            )
        return distance

    async def check_in(
        self,
        user: User,
        branch_id: UUID,
        latitude: float,
        longitude: float,
        selfie_url: str | None = None,
    ) -> TimeEntryResult:
        self._ensure_employee(user)
        self._ensure_selfie(user, selfie_url, "checkin")

        if await self.get_open_entry(user.id) is not None:
            raise StateError(messages.ALREADY_CHECKED_IN, code="ALREADY_CHECKED_IN")

        branch = await self.session.get(Branch, branch_id)
        if branch is None:
            raise NotFoundError(messages.BRANCH_NOT_FOUND, code="BRANCH_NOT_FOUND")

        distance = self._ensure_near(branch, latitude, longitude)

        entry = TimeEntry(
            user_id=user.id,
            branch_id=branch.id,
            check_in_time=utcnow(),
            check_in_selfie_url=selfie_url,
            break_duration=0,
        )
        self.session.add(entry)
        await self.session.flush()
        logger.info("User %s checked in at branch %s", user.id, branch.id)
        return TimeEntryResult(entry, branch, distance)

    async def check_out(
        self,
        user: User,
        latitude: float,
        longitude: float,
        selfie_url: str | None = None,
        checked_out_at: datetime | None = None,
    ) -> TimeEntryResult:
        self._ensure_employee(user)
        self._ensure_selfie(user, selfie_url, "checkout")

        entry = await self.get_open_entry(user.id)
        if entry is None:
            raise StateError(messages.NOT_CHECKED_IN, code="NOT_CHECKED_IN")

        branch = await self.session.get(Branch, entry.branch_id)
        if branch is None:
            raise NotFoundError(messages.BRANCH_NOT_FOUND, code="BRANCH_NOT_FOUND")

        distance = self._ensure_near(branch, latitude, longitude)

        check_in = entry.check_in_time
        if check_in.tzinfo is None:
            check_in = check_in.replace(tzinfo=timezone.utc)
        check_out = max(checked_out_at or utcnow(), check_in)

        entry.check_out_time = check_out
        entry.check_out_selfie_url = selfie_url
        entry.total_hours = to_money(WorkSession(check_in, check_out).hours)
        await self.session.flush()
        logger.info(
            "User %s checked out from branch %s after %s hours",
            user.id,
            branch.id,
            entry.total_hours,
        )
        return TimeEntryResult(entry, branch, distance)
