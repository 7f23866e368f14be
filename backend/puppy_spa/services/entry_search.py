"""
Read-only filtering and text search over waiting list entries.

Text matching is case-insensitive substring containment over owner_name,
puppy_name and service_required. LIKE wildcards typed by the user are
escaped, so "50%" matches literally.

Results are ordered by list date (newest first), then position, then id.
"""

from typing import List, Optional

from sqlmodel import Session, or_, select

from puppy_spa.models.waiting_list import WaitingList
from puppy_spa.models.waiting_list_entry import WaitingListEntry
from puppy_spa.services.list_resolution import get_list, get_list_by_date
from puppy_spa.services.transactions import guarded_read


def _text_filter(needle: str):
    return or_(
        WaitingListEntry.owner_name.icontains(needle, autoescape=True),
        WaitingListEntry.puppy_name.icontains(needle, autoescape=True),
        WaitingListEntry.service_required.icontains(needle, autoescape=True),
    )


def _query_entries(
    session: Session,
    waiting_list_id: Optional[int] = None,
    status: Optional[str] = None,
    needle: Optional[str] = None,
) -> List[WaitingListEntry]:
    query = select(WaitingListEntry).join(WaitingList, WaitingListEntry.waiting_list_id == WaitingList.id)
    if waiting_list_id is not None:
        query = query.where(WaitingListEntry.waiting_list_id == waiting_list_id)
    if status:
        query = query.where(WaitingListEntry.status == status.upper())
    if needle:
        query = query.where(_text_filter(needle))
    query = query.order_by(WaitingList.date.desc(), WaitingListEntry.position, WaitingListEntry.id)
    with guarded_read(session, "query entries"):
        return list(session.exec(query).all())


def search_entries(
    session: Session,
    query: Optional[str],
    waiting_list_id: Optional[int] = None,
    status: Optional[str] = None,
) -> List[WaitingListEntry]:
    """Search across all lists. An empty query matches nothing."""
    needle = (query or "").strip()
    if not needle:
        return []
    return _query_entries(session, waiting_list_id=waiting_list_id, status=status, needle=needle)


def list_entries(
    session: Session,
    waiting_list_id: Optional[int] = None,
    date: Optional[str] = None,
    status: Optional[str] = None,
    query: Optional[str] = None,
) -> List[WaitingListEntry]:
    """
    Entries filtered by list (id or YYYY-MM-DD date), status and text.

    Raises:
        InvalidInputError: malformed date
        NotFoundError: the referenced list does not exist
    """
    if date:
        waiting_list_id = get_list_by_date(session, date).id
    elif waiting_list_id is not None:
        get_list(session, waiting_list_id)

    needle = (query or "").strip() or None
    return _query_entries(session, waiting_list_id=waiting_list_id, status=status, needle=needle)
