from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from puppy_spa.database import get_session
from puppy_spa.routes.entries import EntryResponse
from puppy_spa.services.entry_search import search_entries
from puppy_spa.services.errors import WaitingListError
from puppy_spa.utils.http_errors import http_error_for

router = APIRouter()


@router.get("/search", response_model=List[EntryResponse])
def search(
    query: Optional[str] = Query(None, description="Matched against owner, puppy and service, ignoring case"),
    list_id: Optional[int] = None,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """Search entries across all waiting lists, newest list first"""
    try:
        return search_entries(session, query, waiting_list_id=list_id, status=status)
    except WaitingListError as e:
        raise http_error_for(e)
