"""Entry store and monthly compliance aggregation for education hours.

Everything here takes an open ``Session`` and plain Python values so it can be
called from any HTTP layer (or a script) once the caller has established who
the user is.
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy import and_, func, true
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from backend.core.exceptions import InvalidInputError
from backend.models.education_entry import DEFAULT_CATEGORY, EducationEntry
from backend.models.user import User

# Business rule: a user meets the monthly requirement at 2.5 logged hours.
COMPLIANCE_THRESHOLD_HOURS = Decimal('2.5')
MAX_ENTRY_HOURS = Decimal('24')
HOURS_QUANTUM = Decimal('0.01')


@dataclass(frozen=True)
class MonthlySummaryRow:
    user_id: str
    full_name: str
    total_hours: Decimal
    entry_count: int
    requirement_met: bool


def _parse_hours(value) -> Decimal:
    try:
        hours = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError('Hours must be a number') from exc
    if not hours.is_finite():
        raise InvalidInputError('Hours must be a number')
    return hours


def _to_hours(value) -> Decimal:
    return _parse_hours(value).quantize(HOURS_QUANTUM)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the half-open ``[first day, first day of next month)`` range."""
    if not 1 <= month <= 12:
        raise InvalidInputError('Month must be between 1 and 12')

    try:
        start = date(year, month, 1)
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    except ValueError as exc:
        raise InvalidInputError('Year is out of range') from exc
    return start, end


def active_user_clause():
    # Compare with "= 1"; SQL Server rejects "IS 1" on a bit column.
    return User.is_active == true()


def is_requirement_met(total_hours: Decimal) -> bool:
    return total_hours >= COMPLIANCE_THRESHOLD_HOURS


def add_entry(
    db: Session,
    user_id: str,
    activity_date: date | None,
    hours,
    description: str | None,
    category: str | None = None,
) -> EducationEntry:
    if not activity_date or not hours or not description or not description.strip():
        raise InvalidInputError('Date, hours, and description are required')

    # Range is checked on the raw value; the column only keeps two decimals.
    raw_hours = _parse_hours(hours)
    hours_value = raw_hours.quantize(HOURS_QUANTUM)
    if raw_hours <= 0 or raw_hours > MAX_ENTRY_HOURS or hours_value <= 0:
        raise InvalidInputError('Hours must be between 0 and 24')

    entry = EducationEntry(
        user_id=user_id,
        activity_date=activity_date,
        hours=hours_value,
        description=description,
        category=category or DEFAULT_CATEGORY,
        created_date=datetime.now(),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    return entry


def list_entries(
    db: Session,
    user_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Row]:
    """Entries with their owner's name and email, newest activity first.

    Each row unpacks as ``(entry, full_name, email)``. Visibility is not
    restricted here: pass ``user_id`` to limit the result to one owner.
    """
    query = db.query(EducationEntry, User.full_name, User.email).join(
        User, EducationEntry.user_id == User.id
    )

    if user_id:
        query = query.filter(EducationEntry.user_id == user_id)
    if start_date:
        query = query.filter(EducationEntry.activity_date >= start_date)
    if end_date:
        query = query.filter(EducationEntry.activity_date <= end_date)

    return query.order_by(
        EducationEntry.activity_date.desc(),
        EducationEntry.created_date.desc(),
        EducationEntry.entry_id.desc(),
    ).all()


def delete_entry(db: Session, entry_id: int, user_id: str) -> bool:
    """Delete an entry owned by ``user_id``.

    ``False`` means the entry does not exist or belongs to someone else; the
    two cases are deliberately not told apart.
    """
    deleted = db.query(EducationEntry).filter(
        EducationEntry.entry_id == entry_id,
        EducationEntry.user_id == user_id,
    ).delete(synchronize_session=False)
    db.commit()

    return deleted > 0


def monthly_summary(db: Session, year: int, month: int) -> list[MonthlySummaryRow]:
    start, end = month_bounds(year, month)

    rows = db.query(
        User.id,
        User.full_name,
        func.coalesce(func.sum(EducationEntry.hours), 0).label('total_hours'),
        func.count(EducationEntry.entry_id).label('entry_count'),
    ).outerjoin(
        EducationEntry,
        and_(
            EducationEntry.user_id == User.id,
            EducationEntry.activity_date >= start,
            EducationEntry.activity_date < end,
        ),
    ).filter(
        active_user_clause(),
    ).group_by(User.id, User.full_name).order_by(User.full_name.asc()).all()

    summary = []
    for user_id, full_name, total_hours, entry_count in rows:
        total = _to_hours(total_hours or 0)
        summary.append(
            MonthlySummaryRow(
                user_id=str(user_id),
                full_name=full_name,
                total_hours=total,
                entry_count=int(entry_count),
                requirement_met=is_requirement_met(total),
            )
        )
    return summary


def list_active_users(db: Session) -> list[User]:
    return db.query(User).filter(active_user_clause()).order_by(User.full_name.asc()).all()
