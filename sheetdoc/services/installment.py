from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from ..errors import InvalidFieldValue, MissingRequiredField
from ..models.record import FlatRecord

"""Monthly installment schedule generation.

Produces one Thai-language line per month of a loan contract, starting from
the contract start date. The payment day is fixed for every month except
February, where a payment day above 28 is clamped to the last day of that
February (29 in leap years).

The year printed after "พ.ศ." is the Gregorian year plus ``year_offset``.
The offset defaults to 0, which is the behavior documents have always been
produced with; pass 543 only once Buddhist-era output is confirmed wanted.
"""

__all__ = [
    "THAI_MONTHS",
    "InstallmentFields",
    "parse_start_date",
    "build_installment_lines",
    "apply_installment_schedule",
]

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

FEBRUARY = 1  # 0-indexed
FEBRUARY_CLAMP_FROM = 28

LINE_TEMPLATE = (
    "ข้อ 6.{number}) ชำระดอกเบี้ยเงินกู้ รอบเดือน {month} พ.ศ.{year} "
    "คือ วันที่ {day} จำนวน {amount} บาท"
)


@dataclass(frozen=True)
class InstallmentFields:
    """Record field names the schedule reads from and writes to."""
    start_date: str = "วันที่เริ่มปันผล"
    month_count: str = "จำนวนเดือน ตามสัญญา (ใส่เป็นเลขเท่านั้น)"
    payment_day: str = "วันที่จ่ายปันผล"
    amount: str = "ดอกเบี้ยปันผลต่อเดือน"
    derived_field: str = "ประมวลผลตามรอบเดือนปันผล"
    year_offset: int = 0


def parse_start_date(text: str) -> date:
    """Parse a ``dd/mm/yyyy`` date string."""
    parts = str(text).strip().split("/")
    if len(parts) != 3:
        raise InvalidFieldValue(f"Invalid date format {text!r}. Please use the format dd/mm/yyyy")
    try:
        day, month, year = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError as e:
        raise InvalidFieldValue(f"Invalid date {text!r}: {e}") from e


def build_installment_lines(
    start: date,
    month_count: int,
    payment_day: int,
    amount: str,
    *,
    year_offset: int = 0,
) -> list[str]:
    """Generate one schedule line per month, in month order.

    Examples:
        >>> lines = build_installment_lines(date(2024, 1, 31), 2, 31, "1,000")
        >>> lines[1].endswith("คือ วันที่ 29 จำนวน 1,000 บาท")
        True
    """
    if month_count < 0:
        raise InvalidFieldValue(f"month count must be positive, got {month_count}")

    lines: list[str] = []
    start_month = start.month - 1
    for i in range(month_count):
        month = (start_month + i) % 12
        year = start.year + (start_month + i) // 12
        days_in_month = calendar.monthrange(year, month + 1)[1]
        effective_day = payment_day
        if month == FEBRUARY and payment_day > FEBRUARY_CLAMP_FROM:
            effective_day = days_in_month
        lines.append(
            LINE_TEMPLATE.format(
                number=i + 1,
                month=THAI_MONTHS[month],
                year=year + year_offset,
                day=effective_day,
                amount=amount,
            )
        )
    return lines


def apply_installment_schedule(record: FlatRecord, fields: InstallmentFields | None = None) -> list[str]:
    """Compute the schedule from ``record`` and store it under the derived key."""
    fields = fields or InstallmentFields()
    start_text = _required(record, fields.start_date)
    months = _required_int(record, fields.month_count)
    payment_day = _required_int(record, fields.payment_day)
    amount = _required(record, fields.amount)

    lines = build_installment_lines(
        parse_start_date(start_text),
        months,
        payment_day,
        amount,
        year_offset=fields.year_offset,
    )
    record.add_field(fields.derived_field, lines)
    return lines


def _required(record: FlatRecord, key: str) -> str:
    value = record.get(key)
    if value is None or value == "":
        raise MissingRequiredField(key)
    return value if isinstance(value, str) else "\n".join(value)


def _required_int(record: FlatRecord, key: str) -> int:
    text = _required(record, key).strip()
    try:
        return int(text)
    except ValueError:
        raise InvalidFieldValue(f"{key} must be a whole number, got {text!r}") from None
