from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlmodel import Session

from puppy_spa.database import get_session
from puppy_spa.models.waiting_list import WaitingList
from puppy_spa.routes.entries import EntryCreate, EntryResponse
from puppy_spa.services.entry_search import list_entries
from puppy_spa.services.errors import WaitingListError
from puppy_spa.services.list_resolution import (
    all_lists,
    count_entries,
    create_list,
    get_list,
    get_list_by_date,
    lists_for_month,
)
from puppy_spa.services.position_manager import insert_entry
from puppy_spa.utils.http_errors import http_error_for

router = APIRouter()


class WaitingListCreate(BaseModel):
    date: str


class WaitingListResponse(BaseModel):
    id: int
    date: date
    created_at: datetime
    entry_count: int = 0


class WaitingListDetail(WaitingListResponse):
    entries: List[EntryResponse] = []


class MonthlyWaitingListsResponse(BaseModel):
    month: str
    waiting_lists: List[WaitingListResponse]


def _list_response(session: Session, waiting_list: WaitingList) -> WaitingListResponse:
    return WaitingListResponse(
        id=waiting_list.id,
        date=waiting_list.date,
        created_at=waiting_list.created_at,
        entry_count=count_entries(session, waiting_list.id),
    )


def _list_detail(session: Session, waiting_list: WaitingList) -> WaitingListDetail:
    entries = list_entries(session, waiting_list_id=waiting_list.id)
    return WaitingListDetail(
        id=waiting_list.id,
        date=waiting_list.date,
        created_at=waiting_list.created_at,
        entry_count=len(entries),
        entries=[EntryResponse.model_validate(e) for e in entries],
    )


@router.post("/waiting-lists", response_model=WaitingListResponse, status_code=201)
def create_waiting_list(list_data: WaitingListCreate, session: Session = Depends(get_session)):
    """Create the waiting list for a date (one list per date)"""
    try:
        waiting_list = create_list(session, list_data.date)
        return _list_response(session, waiting_list)
    except WaitingListError as e:
        raise http_error_for(e)


@router.get("/waiting-lists", response_model=List[WaitingListResponse])
def list_waiting_lists(session: Session = Depends(get_session)):
    """List all waiting lists by date"""
    try:
        return [_list_response(session, wl) for wl in all_lists(session)]
    except WaitingListError as e:
        raise http_error_for(e)


@router.get("/waiting-lists/date/{list_date}", response_model=WaitingListDetail)
def get_waiting_list_by_date(list_date: str, session: Session = Depends(get_session)):
    """Get the waiting list for a date (YYYY-MM-DD) with its entries"""
    try:
        waiting_list = get_list_by_date(session, list_date)
        return _list_detail(session, waiting_list)
    except WaitingListError as e:
        raise http_error_for(e)


@router.get("/waiting-lists/month/{month}", response_model=MonthlyWaitingListsResponse)
def get_waiting_lists_by_month(month: str, session: Session = Depends(get_session)):
    """Get all waiting lists in a month (YYYY-MM)"""
    try:
        month_key, lists = lists_for_month(session, month)
        return MonthlyWaitingListsResponse(
            month=month_key,
            waiting_lists=[_list_response(session, wl) for wl in lists],
        )
    except WaitingListError as e:
        raise http_error_for(e)


@router.get("/waiting-lists/{list_id}", response_model=WaitingListDetail)
def get_waiting_list(list_id: int, session: Session = Depends(get_session)):
    """Get a waiting list by ID with its entries"""
    try:
        waiting_list = get_list(session, list_id)
        return _list_detail(session, waiting_list)
    except WaitingListError as e:
        raise http_error_for(e)


@router.post("/waiting-lists/{list_id}/entries", response_model=EntryResponse, status_code=201)
def add_entry_to_list(
    list_id: int,
    entry_data: EntryCreate,
    position: Optional[int] = Query(None),
    session: Session = Depends(get_session),
):
    """Add an entry to this list; the list id in the path wins over the body"""
    desired_position = entry_data.position if entry_data.position is not None else position
    try:
        return insert_entry(session, list_id, entry_data.to_fields(), desired_position)
    except WaitingListError as e:
        raise http_error_for(e)


@router.get("/waiting-lists/{list_id}/entries", response_model=List[EntryResponse])
def get_list_entries(list_id: int, status: Optional[str] = None, session: Session = Depends(get_session)):
    """Entries of a list in queue order, optionally filtered by status"""
    try:
        return list_entries(session, waiting_list_id=list_id, status=status)
    except WaitingListError as e:
        raise http_error_for(e)
