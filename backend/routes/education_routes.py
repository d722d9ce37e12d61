import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.auth.schemas import SessionUser
from backend.core.exceptions import InvalidInputError
from backend.database import get_db
from backend.services import education

router = APIRouter(tags=['education'])

logger = logging.getLogger(__name__)


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str
    role: str | None = None

    class Config:
        from_attributes = True


class CreateEntryRequest(BaseModel):
    activity_date: date | None = Field(default=None, alias='date')
    hours: float | None = None
    description: str | None = None
    category: str | None = None


class EntryResponse(BaseModel):
    entry_id: int = Field(alias='EntryID')
    user_id: str = Field(alias='UserID')
    activity_date: date = Field(alias='ActivityDate')
    hours: float = Field(alias='Hours')
    description: str = Field(alias='Description')
    category: str | None = Field(default=None, alias='Category')
    created_date: datetime = Field(alias='CreatedDate')

    class Config:
        from_attributes = True
        populate_by_name = True


class EntryListItemResponse(EntryResponse):
    full_name: str | None = None
    email: str | None = None


class MonthlySummaryRowResponse(BaseModel):
    user_id: str = Field(alias='UserID')
    full_name: str = Field(alias='FullName')
    total_hours: float = Field(alias='TotalHours')
    entry_count: int = Field(alias='EntryCount')
    requirement_met: bool = Field(alias='RequirementMet')

    class Config:
        from_attributes = True
        populate_by_name = True


class MonthlySummaryResponse(BaseModel):
    year: int
    month: int
    summary: list[MonthlySummaryRowResponse]


class MessageResponse(BaseModel):
    message: str


def internal_error(db: Session, action: str) -> HTTPException:
    db.rollback()
    logger.exception('Error %s', action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail='Internal server error',
    )


def parse_positive_int(value: str | None, default: int) -> int:
    # Blank, zero or non-numeric values fall back to the default.
    try:
        parsed = int(value) if value is not None else 0
    except ValueError:
        parsed = 0
    return parsed if parsed > 0 else default


@router.get('/users', response_model=list[UserResponse])
def list_users(
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        users = education.list_active_users(db)
    except SQLAlchemyError as exc:
        raise internal_error(db, 'fetching users') from exc

    return [UserResponse.model_validate(user) for user in users]


@router.get('/education/entries', response_model=list[EntryListItemResponse])
def list_entries(
    user_id: str | None = Query(default=None, alias='userId'),
    start_date: date | None = Query(default=None, alias='startDate'),
    end_date: date | None = Query(default=None, alias='endDate'),
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        rows = education.list_entries(db, user_id=user_id, start_date=start_date, end_date=end_date)
    except SQLAlchemyError as exc:
        raise internal_error(db, 'fetching entries') from exc

    items = []
    for entry, full_name, email in rows:
        item = EntryListItemResponse.model_validate(entry)
        items.append(item.model_copy(update={'full_name': full_name, 'email': email}))
    return items


@router.post('/education/entries', response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    data: CreateEntryRequest,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        entry = education.add_entry(
            db,
            user_id=current_user.user_id,
            activity_date=data.activity_date,
            hours=data.hours,
            description=data.description,
            category=data.category,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise internal_error(db, 'adding entry') from exc

    return EntryResponse.model_validate(entry)


@router.delete('/education/entries/{entry_id}', response_model=MessageResponse)
def remove_entry(
    entry_id: str,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    parsed_entry_id = parse_positive_int(entry_id, default=0)
    if not parsed_entry_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Invalid entry ID')

    try:
        deleted = education.delete_entry(db, parsed_entry_id, current_user.user_id)
    except SQLAlchemyError as exc:
        raise internal_error(db, 'deleting entry') from exc

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Entry not found or unauthorized',
        )

    return MessageResponse(message='Entry deleted successfully')


@router.get('/education/summary/monthly', response_model=MonthlySummaryResponse)
def get_monthly_summary(
    year: str | None = Query(default=None),
    month: str | None = Query(default=None),
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    today = date.today()
    summary_year = parse_positive_int(year, default=today.year)
    summary_month = parse_positive_int(month, default=today.month)

    try:
        rows = education.monthly_summary(db, summary_year, summary_month)
    except InvalidInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise internal_error(db, 'fetching monthly summary') from exc

    return MonthlySummaryResponse(
        year=summary_year,
        month=summary_month,
        summary=[MonthlySummaryRowResponse.model_validate(row) for row in rows],
    )
