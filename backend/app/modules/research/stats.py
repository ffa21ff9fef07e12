"""
Сводная статистика по записям, видимым вызывающему.

Счётчики и суммы считаются в БД; тренды по дням/неделям/месяцам группируются
в Python по created_at записей за последний год.
"""
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.modules.auth.caller import Caller
from app.modules.research.predicate import compile_predicate
from app.modules.research.registry import ResourceSpec
from app.modules.research.schemas import group_counts
from app.modules.research.scope import ScopePolicy, resolve_scope

logger = logging.getLogger(__name__)

MONTHS_BACK = 12
WEEKS_BACK = 12
DAYS_BACK = 30


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _months_ago(now: datetime, months: int) -> datetime:
    """Тот же момент months месяцев назад (день прижимается к 28, чтобы не выпасть из месяца)."""
    month_index = now.year * 12 + (now.month - 1) - months
    return now.replace(year=month_index // 12, month=month_index % 12 + 1, day=min(now.day, 28))


def month_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m")


def week_key(moment: datetime) -> str:
    """ISO-неделя: 2024-W05."""
    year, week, _ = moment.isocalendar()
    return f"{year}-W{week:02d}"


def day_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d")


def build_trends(created: list[datetime], now: datetime) -> dict[str, list[dict[str, Any]]]:
    """Тренды создания записей: только непустые корзины, по возрастанию."""
    created = [_as_utc(c) for c in created]
    month_cutoff = _months_ago(now, MONTHS_BACK)
    week_cutoff = now - timedelta(weeks=WEEKS_BACK)
    day_cutoff = now - timedelta(days=DAYS_BACK)

    monthly = Counter(month_key(c) for c in created if c >= month_cutoff)
    weekly = Counter(week_key(c) for c in created if c >= week_cutoff)
    daily = Counter(day_key(c) for c in created if c >= day_cutoff)
    return {
        "monthlyTrend": [{"month": k, "count": v} for k, v in sorted(monthly.items())],
        "weeklyTrend": [{"week": k, "count": v} for k, v in sorted(weekly.items())],
        "dailyTrend": [{"date": k, "count": v} for k, v in sorted(daily.items())],
    }


async def _group(session: AsyncSession, spec: ResourceSpec, condition, field: str) -> list[tuple[Any, int]]:
    column = getattr(spec.model, field)
    result = await session.execute(
        select(column, func.count(spec.model.id))
        .where(condition)
        .group_by(column)
        .order_by(column)
    )
    return [(row[0], row[1]) for row in result.all()]


def _number(value: Any) -> float:
    return float(value) if value is not None else 0


async def compute_stats(
    session: AsyncSession,
    spec: ResourceSpec,
    caller: Caller,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Статистика по видимым вызывающему записям (публичные или свои; ADMIN видит всё)."""
    now = now or datetime.now(timezone.utc)
    settings = get_settings()
    scope = resolve_scope(caller, ScopePolicy.PUBLIC_OR_AUTHORED)
    condition = compile_predicate(scope, spec, session.get_bind().dialect.name)
    model = spec.model

    total = await session.scalar(select(func.count()).select_from(model).where(condition))
    public_count = await session.scalar(
        select(func.count()).select_from(model).where(condition, model.is_public.is_(True))
    )
    total = int(total or 0)
    public_count = int(public_count or 0)

    stats: dict[str, Any] = {
        "userRole": caller.role.value,
        "total": total,
        "publicCount": public_count,
        "privateCount": total - public_count,
        "statusCounts": group_counts("status", await _group(session, spec, condition, "teacher_status")),
        "researchStatusCounts": group_counts("status", await _group(session, spec, condition, "status")),
    }
    for key, field in spec.stats_groups:
        stats[key] = group_counts(to_camel(field), await _group(session, spec, condition, field))

    averages = [func.avg(getattr(model, field)) for _, field in spec.stats_averages]
    row = (
        await session.execute(
            select(
                func.sum(model.registration_fees),
                func.sum(model.reimbursement),
                func.avg(model.registration_fees),
                func.avg(model.reimbursement),
                *averages,
            ).where(condition)
        )
    ).one()
    financials = {
        "totalRegistrationFees": _number(row[0]),
        "totalReimbursement": _number(row[1]),
        "avgRegistrationFees": _number(row[2]),
        "avgReimbursement": _number(row[3]),
    }
    for index, (key, _) in enumerate(spec.stats_averages):
        financials[key] = _number(row[4 + index])
    stats["financials"] = financials

    recent = await session.execute(
        select(model)
        .where(condition)
        .order_by(model.created_at.desc(), model.id.desc())
        .limit(settings.STATS_RECENT_LIMIT)
    )
    stats["recent"] = [
        {
            "id": r.id,
            "title": r.title,
            "status": r.status.value,
            "teacherStatus": r.teacher_status.value,
            "isPublic": r.is_public,
            "createdAt": _as_utc(r.created_at).isoformat(),
        }
        for r in recent.scalars().all()
    ]

    trend_cutoff = _months_ago(now, MONTHS_BACK)
    created = await session.scalars(
        select(model.created_at).where(condition, model.created_at >= trend_cutoff)
    )
    stats.update(build_trends(list(created.all()), now))
    logger.debug("Stats for %s computed for caller %s: total=%s", spec.label, caller.id, total)
    return stats
