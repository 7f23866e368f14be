"""
Waiting list creation and lookup.

There is at most one waiting list per calendar date. The unique constraint on
WaitingList.date is the source of truth: the pre-check below gives a clean
error in the common case, and a concurrent create that slips past it fails
on commit and is reported the same way.

Entries are attached to a list either by explicit id or by the UTC date of
their arrival time. Lists are never created implicitly; a missing list is an
error and the caller must create it first.
"""

import logging
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

from sqlmodel import Session, func, select

from puppy_spa.models.waiting_list import WaitingList
from puppy_spa.models.waiting_list_entry import WaitingListEntry
from puppy_spa.services.errors import ConflictError, InvalidInputError, NotFoundError
from puppy_spa.services.transactions import atomic, guarded_read
from puppy_spa.utils.dates import parse_date_key, parse_month, parse_strict_date, to_utc_date
from puppy_spa.utils.sql import scalar_int

logger = logging.getLogger(__name__)


def _find_by_date(session: Session, list_date: date) -> Optional[WaitingList]:
    return session.exec(select(WaitingList).where(WaitingList.date == list_date)).first()


def create_list(session: Session, raw_date: Union[str, date, datetime]) -> WaitingList:
    """
    Create the waiting list for a date.

    Raises:
        InvalidInputError: date does not parse
        ConflictError: a list already exists for that date
        InternalError: unexpected persistence failure
    """
    try:
        list_date = parse_date_key(raw_date)
    except ValueError as e:
        raise InvalidInputError(str(e)) from e

    conflict = f"A waiting list already exists for date {list_date.isoformat()}"
    with atomic(session, "create waiting list", conflict_message=conflict):
        if _find_by_date(session, list_date):
            logger.warning("Rejected duplicate waiting list for %s", list_date)
            raise ConflictError(conflict)
        waiting_list = WaitingList(date=list_date)
        session.add(waiting_list)

    session.refresh(waiting_list)
    logger.info("Created waiting list %d for %s", waiting_list.id, list_date)
    return waiting_list


def get_list(session: Session, list_id: int) -> WaitingList:
    with guarded_read(session, "load waiting list"):
        waiting_list = session.get(WaitingList, list_id)
    if not waiting_list:
        raise NotFoundError(f"Waiting list with ID {list_id} not found")
    return waiting_list


def get_list_by_date(session: Session, raw_date: str) -> WaitingList:
    try:
        list_date = parse_strict_date(raw_date)
    except ValueError as e:
        raise InvalidInputError(str(e)) from e

    with guarded_read(session, "load waiting list"):
        waiting_list = _find_by_date(session, list_date)
    if not waiting_list:
        raise NotFoundError(f"No waiting list found for date {list_date.isoformat()}")
    return waiting_list


def lists_for_month(session: Session, raw_month: str) -> Tuple[str, List[WaitingList]]:
    """Return (month, lists in that month ordered by date)."""
    try:
        first_day, last_day = parse_month(raw_month)
    except ValueError as e:
        raise InvalidInputError(str(e)) from e

    with guarded_read(session, "list waiting lists"):
        lists = session.exec(
            select(WaitingList)
            .where(WaitingList.date >= first_day, WaitingList.date <= last_day)
            .order_by(WaitingList.date)
        ).all()
    return raw_month, list(lists)


def all_lists(session: Session) -> List[WaitingList]:
    with guarded_read(session, "list waiting lists"):
        return list(session.exec(select(WaitingList).order_by(WaitingList.date)).all())


def count_entries(session: Session, list_id: int) -> int:
    with guarded_read(session, "count entries"):
        return scalar_int(
            session.exec(
                select(func.count(WaitingListEntry.id)).where(WaitingListEntry.waiting_list_id == list_id)
            ).one()
        )


def resolve_list_for_entry(
    session: Session,
    waiting_list_id: Optional[int] = None,
    target_time: Optional[Union[date, datetime]] = None,
) -> WaitingList:
    """
    Find the list an entry belongs to.

    An explicit id wins. Otherwise the target time is reduced to its UTC
    date and the list for that date is looked up. Read-only.

    Raises:
        NotFoundError: no list with that id, or none for that date
        InvalidInputError: neither an id nor a target time was given
        InternalError: unexpected persistence failure
    """
    if waiting_list_id is not None:
        return get_list(session, waiting_list_id)

    if target_time is None:
        raise InvalidInputError("Either waiting_list_id or arrival_time is required")

    list_date = to_utc_date(target_time)
    with guarded_read(session, "resolve waiting list"):
        waiting_list = _find_by_date(session, list_date)
    if not waiting_list:
        raise NotFoundError(
            f"No waiting list found for date {list_date.isoformat()}. Please create a waiting list first."
        )
    return waiting_list
