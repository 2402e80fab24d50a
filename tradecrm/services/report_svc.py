"""Reporting - dashboard aggregates over leads and payments."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ValidationError
from ..models.lead import CONVERTED_STATUSES, Lead
from ..models.payment import Payment
from ..security.sessions import SessionUser

MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
TOP_TOWNS = 10


def parse_month(month: str | tuple[int, int] | None) -> tuple[datetime, datetime] | None:
    """Turn ``"YYYY-MM"`` or ``(year, month)`` into a half-open UTC range."""
    if month is None or month == "":
        return None
    if isinstance(month, str):
        match = MONTH_RE.match(month.strip())
        if not match:
            raise ValidationError("month must be YYYY-MM")
        year, mon = int(match.group(1)), int(match.group(2))
    else:
        year, mon = month
    if not 1 <= mon <= 12:
        raise ValidationError("month must be YYYY-MM")

    try:
        start = datetime(year, mon, 1, tzinfo=timezone.utc)
        if mon == 12:
            end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
        else:
            end = datetime(year, mon + 1, 1, tzinfo=timezone.utc)
    except ValueError:
        raise ValidationError("month must be YYYY-MM") from None
    return start, end


def _in_range(column, window):
    if window is None:
        return []
    start, end = window
    return [column >= start, column < end]


async def dashboard(
    db: AsyncSession,
    requester: SessionUser,
    month: str | tuple[int, int] | None = None,
) -> dict:
    window = parse_month(month)
    lead_scope = _in_range(Lead.created_at, window)

    total_leads = (await db.execute(
        select(func.count(Lead.id)).where(*lead_scope)
    )).scalar() or 0

    by_status = (await db.execute(
        select(Lead.status, func.count(Lead.id)).where(*lead_scope).group_by(Lead.status)
    )).all()

    by_trade = (await db.execute(
        select(Lead.trade_type, func.count(Lead.id))
        .where(*lead_scope)
        .group_by(Lead.trade_type)
    )).all()

    # Order among equal counts is whatever the database returns.
    town_count = func.count(Lead.id)
    by_town = (await db.execute(
        select(Lead.town, town_count)
        .where(*lead_scope, Lead.town.is_not(None), Lead.town != "")
        .group_by(Lead.town)
        .order_by(town_count.desc())
        .limit(TOP_TOWNS)
    )).all()

    converted = (await db.execute(
        select(func.count(Lead.id)).where(*lead_scope, Lead.status.in_(CONVERTED_STATUSES))
    )).scalar() or 0

    revenue_total, revenue_count = (await db.execute(
        select(func.coalesce(func.sum(Payment.amount), 0), func.count(Payment.id))
        .where(Payment.status == "paid", *_in_range(Payment.created_at, window))
    )).one()

    conversion_rate = round(converted / total_leads * 100, 1) if total_leads else 0
    per_lead = round(revenue_total / total_leads, 2) if total_leads else 0

    return {
        "totalLeads": total_leads,
        "leadsByStatus": [{"status": s, "count": c} for s, c in by_status],
        "leadsByTrade": [{"trade_type": t, "count": c} for t, c in by_trade],
        "leadsByTown": [{"town": t, "count": c} for t, c in by_town],
        "conversionRate": conversion_rate,
        "revenue": {
            "total": revenue_total,
            "count": revenue_count,
            "perLead": per_lead,
        },
    }
