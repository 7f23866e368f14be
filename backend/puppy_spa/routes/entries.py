from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, field_validator
from sqlmodel import Session

from puppy_spa.database import get_session
from puppy_spa.models.waiting_list_entry import EntryStatus
from puppy_spa.services.entry_search import list_entries
from puppy_spa.services.errors import WaitingListError
from puppy_spa.services.position_manager import (
    EntryFields,
    create_entry,
    get_entry,
    move_entry,
    remove_entry,
    update_entry_status,
)
from puppy_spa.utils.http_errors import http_error_for

router = APIRouter()


class EntryCreate(BaseModel):
    owner_name: Optional[str] = None
    puppy_name: Optional[str] = None
    service_required: str
    arrival_time: datetime
    waiting_list_id: Optional[int] = None
    position: Optional[int] = None

    def to_fields(self) -> EntryFields:
        return EntryFields(
            service_required=self.service_required,
            arrival_time=self.arrival_time,
            owner_name=self.owner_name,
            puppy_name=self.puppy_name,
        )


class EntryStatusUpdate(BaseModel):
    status: EntryStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        """Accept 'waiting' as well as 'WAITING'."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class EntryPositionUpdate(BaseModel):
    position: int


class EntryResponse(BaseModel):
    id: int
    waiting_list_id: int
    owner_name: Optional[str]
    puppy_name: Optional[str]
    service_required: str
    arrival_time: datetime
    position: int
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


@router.post("/entries", response_model=EntryResponse, status_code=201)
def create_waiting_list_entry(
    entry_data: EntryCreate,
    position: Optional[int] = Query(None, description="Desired position; the body value wins if both are given"),
    session: Session = Depends(get_session),
):
    """
    Add an entry to a waiting list.

    The list is taken from waiting_list_id, or else from the UTC date of
    arrival_time; a list must already exist for that date. Without a
    position the entry is appended.
    """
    desired_position = entry_data.position if entry_data.position is not None else position
    try:
        return create_entry(
            session,
            entry_data.to_fields(),
            waiting_list_id=entry_data.waiting_list_id,
            desired_position=desired_position,
        )
    except WaitingListError as e:
        raise http_error_for(e)


@router.get("/entries", response_model=List[EntryResponse])
def get_entries(
    list_id: Optional[int] = None,
    date: Optional[str] = Query(None, description="List date, YYYY-MM-DD"),
    status: Optional[str] = None,
    search: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """List entries, optionally filtered by list, date, status and text"""
    try:
        return list_entries(session, waiting_list_id=list_id, date=date, status=status, query=search)
    except WaitingListError as e:
        raise http_error_for(e)


@router.get("/entries/{entry_id}", response_model=EntryResponse)
def get_waiting_list_entry(entry_id: int, session: Session = Depends(get_session)):
    """Get an entry by ID"""
    try:
        return get_entry(session, entry_id)
    except WaitingListError as e:
        raise http_error_for(e)


@router.put("/entries/{entry_id}/status", response_model=EntryResponse)
def set_entry_status(entry_id: int, update_data: EntryStatusUpdate, session: Session = Depends(get_session)):
    """Update the status of an entry"""
    try:
        return update_entry_status(session, entry_id, update_data.status)
    except WaitingListError as e:
        raise http_error_for(e)


@router.put("/entries/{entry_id}/position", response_model=EntryResponse)
def set_entry_position(entry_id: int, update_data: EntryPositionUpdate, session: Session = Depends(get_session)):
    """Move an entry; the entries in between shift to keep positions dense"""
    try:
        return move_entry(session, entry_id, update_data.position)
    except WaitingListError as e:
        raise http_error_for(e)


@router.delete("/entries/{entry_id}", response_model=EntryResponse)
def delete_waiting_list_entry(entry_id: int, session: Session = Depends(get_session)):
    """Remove an entry and return it"""
    try:
        return remove_entry(session, entry_id)
    except WaitingListError as e:
        raise http_error_for(e)
