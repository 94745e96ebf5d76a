"""Payroll cycle export to CSV and JSON."""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from urllib.parse import quote
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from employee_management import messages
from employee_management.calculators.net_pay import to_money
from employee_management.errors import ValidationError
from employee_management.models import utcnow
from employee_management.services.payroll_cycle_service import (
    CycleSummary,
    PayrollCycleService,
)

UTF8_BOM = "\ufeff"

THAI_MONTHS = (
    "มกราคม",
    "กุมภาพันธ์",
    "มีนาคม",
    "เมษายน",
    "พฤษภาคม",
    "มิถุนายน",
    "กรกฎาคม",
    "สิงหาคม",
    "กันยายน",
    "ตุลาคม",
    "พฤศจิกายน",
    "ธันวาคม",
)

STATUS_LABELS = {"active": "กำลังดำเนินการ", "completed": "ปิดรอบแล้ว"}

CSV_COLUMNS = (
    "ลำดับ",
    "รหัสพนักงาน",
    "ชื่อ-นามสกุล",
    "สาขา",
    "เงินเดือนพื้นฐาน",
    "ค่าล่วงเวลา",
    "โบนัส",
    "เหตุผลโบนัส",
    "หักเงิน",
    "เหตุผลการหัก",
    "เงินเดือนสุทธิ",
    "วิธีการคำนวณ",
)


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


def parse_format(value: str | None) -> ExportFormat:
    try:
        return ExportFormat((value or "csv").lower())
    except ValueError:
        raise ValidationError(
            messages.EXPORT_INVALID_FORMAT,
            code="INVALID_EXPORT_FORMAT",
            context={"format": value},
        ) from None


def format_thai_date(value: date | datetime | None) -> str:
    """e.g. 15 มกราคม 2568 (Buddhist era)."""
    if value is None:
        return ""
    return f"{value.day} {THAI_MONTHS[value.month - 1]} {value.year + 543}"


def format_baht(amount: Decimal | None) -> str:
    return f"฿{to_money(amount):,.2f}"


def _amount(value: Decimal | None) -> str:
    return f"{to_money(value):.2f}"


@dataclass
class CsvExport:
    filename: str
    content: str

    @property
    def content_disposition(self) -> str:
        # Cycle names are usually Thai; keep an ASCII fallback for old clients
        ascii_name = self.filename.encode("ascii", "ignore").decode() or "payroll.csv"
        return (
            f'attachment; filename="{ascii_name}"; '
            f"filename*=UTF-8''{quote(self.filename)}"
        )


def export_filename(cycle_name: str, exported_on: date) -> str:
    slug = re.sub(r"\s+", "-", cycle_name.strip())
    slug = re.sub(r'[\\/:*?"<>|]', "", slug)
    return f"payroll-{slug}-{exported_on.isoformat()}.csv"


def render_csv(summary: CycleSummary) -> str:
    """Thai header block, one row per employee, then totals."""
    cycle = summary.cycle
    totals = summary.totals

    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(["รายงานเงินเดือน", cycle.name])
    writer.writerow(
        ["ช่วงเวลา", f"{format_thai_date(cycle.start_date)} - {format_thai_date(cycle.end_date)}"]
    )
    writer.writerow(["สถานะ", STATUS_LABELS.get(cycle.status, cycle.status)])
    writer.writerow(["จำนวนพนักงาน", totals.total_employees])
    writer.writerow(["ยอดรวมสุทธิ", format_baht(totals.total_net_pay)])
    writer.writerow([])

    writer.writerow(CSV_COLUMNS)
    for index, row in enumerate(summary.rows, start=1):
        writer.writerow([
            index,
            row.employee_code or "",
            row.display_name,
            row.branch_name or messages.NO_BRANCH_NAME,
            _amount(row.base_pay),
            _amount(row.overtime_pay),
            _amount(row.bonus),
            row.bonus_reason or "",
            _amount(row.deduction),
            row.deduction_reason or "",
            _amount(row.net_pay),
            row.calculation_method,
        ])

    writer.writerow([])
    writer.writerow(["สรุป"])
    writer.writerow(["รวมเงินเดือนพื้นฐาน", _amount(totals.total_base_pay)])
    writer.writerow(["รวมค่าล่วงเวลา", _amount(totals.total_overtime_pay)])
    writer.writerow(["รวมโบนัส", _amount(totals.total_bonus)])
    writer.writerow(["รวมหักเงิน", _amount(totals.total_deduction)])
    writer.writerow(["รวมเงินเดือนสุทธิ", _amount(totals.total_net_pay)])
    writer.writerow(["เงินเดือนสุทธิเฉลี่ย", _amount(totals.average_net_pay)])

    return UTF8_BOM + output.getvalue()


class ExportService:
    """Read-only export of a cycle's payroll."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.cycles = PayrollCycleService(session)

    async def export_csv(self, cycle_id: UUID) -> CsvExport:
        summary = await self.cycles.build_summary(cycle_id)
        return CsvExport(
            filename=export_filename(summary.cycle.name, utcnow().date()),
            content=render_csv(summary),
        )

    async def export_json(
        self,
        cycle_id: UUID,
        include_details: bool,
        exported_by: UUID | None,
    ) -> dict[str, Any]:
        summary = await self.cycles.build_summary(cycle_id)
        return {
            "cycle": summary.cycle,
            "summary": summary.totals.to_dict(),
            "employee_details": (
                [row.to_dict() for row in summary.rows] if include_details else None
            ),
            "export_info": {
                "exported_at": utcnow(),
                "exported_by": exported_by,
                "format": ExportFormat.JSON.value,
                "include_details": include_details,
            },
        }
