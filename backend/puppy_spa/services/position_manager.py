"""
Entry Position Manager

Keeps the positions of every waiting list dense: for a list with N entries
the positions are exactly 1..N, with no gaps and no duplicates, after every
committed insert, move and remove.

Each mutating call is a single transaction that starts by locking the owning
WaitingList row (SELECT ... FOR UPDATE). Two requests reordering the same list
are therefore serialized by the database, while requests against different
lists lock different rows and proceed independently. SQLite ignores the lock
clause; there every transaction is opened with BEGIN IMMEDIATE (see
database.create_db_engine), which takes the database write lock before the
first read, so position changes are serialized across all lists.

Shifts are range-bounded bulk UPDATEs:

- insert at k:         [k, M]       += 1
- move earlier o -> n: [n, o)       += 1
- move later   o -> n: (o, n]       -= 1
- remove at o:         (o, N]       -= 1   (when compacting)

The moved entry itself is never inside its own shift range.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy import update
from sqlmodel import Session, func, select

from puppy_spa.models.waiting_list import WaitingList
from puppy_spa.models.waiting_list_entry import EntryStatus, WaitingListEntry
from puppy_spa.services.errors import ConflictError, InvalidInputError, NotFoundError
from puppy_spa.services.list_resolution import count_entries, resolve_list_for_entry
from puppy_spa.services.transactions import atomic, guarded_read
from puppy_spa.utils.dates import to_utc
from puppy_spa.utils.entry_validation import EntryValidationResult, validate_entry_fields
from puppy_spa.utils.sql import scalar_int

logger = logging.getLogger(__name__)

# Whether removing an entry closes the gap it leaves behind.
COMPACT_ON_REMOVE = os.getenv("COMPACT_ON_REMOVE", "true").lower() in ("true", "1", "yes")


@dataclass
class EntryFields:
    """Plain data for a new entry, as parsed by the route layer."""

    service_required: str
    arrival_time: datetime
    owner_name: Optional[str] = None
    puppy_name: Optional[str] = None


def _lock_list(session: Session, list_id: int) -> WaitingList:
    waiting_list = session.exec(
        select(WaitingList).where(WaitingList.id == list_id).with_for_update()
    ).first()
    if not waiting_list:
        raise NotFoundError(f"Waiting list with ID {list_id} not found")
    return waiting_list


def _max_position(session: Session, list_id: int) -> int:
    return scalar_int(
        session.exec(
            select(func.max(WaitingListEntry.position)).where(WaitingListEntry.waiting_list_id == list_id)
        ).one()
    )


def _shift_positions(
    session: Session, list_id: int, delta: int, lower: Optional[int] = None, upper: Optional[int] = None
) -> None:
    """Add delta to every position of the list within [lower, upper] (inclusive, open-ended if None)."""
    stmt = update(WaitingListEntry).where(WaitingListEntry.waiting_list_id == list_id)
    if lower is not None:
        stmt = stmt.where(WaitingListEntry.position >= lower)
    if upper is not None:
        stmt = stmt.where(WaitingListEntry.position <= upper)
    stmt = stmt.values(position=WaitingListEntry.position + delta)
    session.exec(stmt)


def get_entry(session: Session, entry_id: int) -> WaitingListEntry:
    with guarded_read(session, "load entry"):
        entry = session.get(WaitingListEntry, entry_id)
    if not entry:
        raise NotFoundError(f"Entry with ID {entry_id} not found")
    return entry


def list_positions(session: Session, list_id: int) -> List[int]:
    """Positions of a list in ascending order."""
    with guarded_read(session, "list positions"):
        return list(
            session.exec(
                select(WaitingListEntry.position)
                .where(WaitingListEntry.waiting_list_id == list_id)
                .order_by(WaitingListEntry.position)
            ).all()
        )


def _validated(fields: EntryFields) -> EntryValidationResult:
    validation = validate_entry_fields(fields.owner_name, fields.puppy_name, fields.service_required)
    if not validation.is_valid:
        raise InvalidInputError("; ".join(validation.errors))
    return validation


def _insert_validated(
    session: Session,
    list_id: int,
    validation: EntryValidationResult,
    arrival_time: datetime,
    desired_position: Optional[int],
) -> WaitingListEntry:
    with atomic(session, "create entry"):
        _lock_list(session, list_id)
        max_position = _max_position(session, list_id)

        if desired_position is None:
            position = max_position + 1
        else:
            if desired_position < 1 or desired_position > max_position + 1:
                logger.warning(
                    "Rejected insert at position %d on list %d (max %d)", desired_position, list_id, max_position
                )
                raise ConflictError(f"Position must be between 1 and {max_position + 1}")
            position = desired_position
            _shift_positions(session, list_id, +1, lower=position)

        entry = WaitingListEntry(
            waiting_list_id=list_id,
            owner_name=validation.owner_name,
            puppy_name=validation.puppy_name,
            service_required=validation.service_required,
            arrival_time=to_utc(arrival_time),
            position=position,
            status=EntryStatus.waiting.value,
        )
        session.add(entry)

    session.refresh(entry)
    logger.info("Inserted entry %d on list %d at position %d", entry.id, list_id, position)
    return entry


def insert_entry(
    session: Session, list_id: int, fields: EntryFields, desired_position: Optional[int] = None
) -> WaitingListEntry:
    """
    Add an entry to a list.

    Without desired_position the entry is appended (max + 1). With it, the
    position must lie in 1..max+1 and every entry at or after it moves back
    by one.

    Raises:
        InvalidInputError: neither owner_name nor puppy_name, or no service
        NotFoundError: list does not exist
        ConflictError: desired_position out of range
        InternalError: unexpected persistence failure
    """
    return _insert_validated(session, list_id, _validated(fields), fields.arrival_time, desired_position)


def create_entry(
    session: Session,
    fields: EntryFields,
    waiting_list_id: Optional[int] = None,
    desired_position: Optional[int] = None,
) -> WaitingListEntry:
    """Resolve the target list (explicit id, else the arrival date) and insert into it."""
    validation = _validated(fields)
    waiting_list = resolve_list_for_entry(session, waiting_list_id, fields.arrival_time)
    return _insert_validated(session, waiting_list.id, validation, fields.arrival_time, desired_position)


def move_entry(session: Session, entry_id: int, new_position: int) -> WaitingListEntry:
    """
    Move an entry to new_position, shifting the entries in between.

    Moving to the current position is a no-op and returns the entry as is.

    Raises:
        NotFoundError: entry does not exist
        ConflictError: new_position outside 1..N
        InternalError: unexpected persistence failure
    """
    with atomic(session, "update entry position"):
        entry = get_entry(session, entry_id)
        list_id = entry.waiting_list_id
        _lock_list(session, list_id)
        # Re-read under the lock; another request may have moved it.
        session.refresh(entry)
        old_position = entry.position

        if new_position == old_position:
            return entry

        total = count_entries(session, list_id)
        if new_position < 1 or new_position > total:
            logger.warning(
                "Rejected move of entry %d to position %d on list %d (%d entries)",
                entry_id,
                new_position,
                list_id,
                total,
            )
            raise ConflictError(f"Position must be between 1 and {total}")

        if new_position < old_position:
            _shift_positions(session, list_id, +1, lower=new_position, upper=old_position - 1)
        else:
            _shift_positions(session, list_id, -1, lower=old_position + 1, upper=new_position)

        entry.position = new_position
        session.add(entry)

    session.refresh(entry)
    logger.info("Moved entry %d on list %d from %d to %d", entry_id, list_id, old_position, new_position)
    return entry


def remove_entry(session: Session, entry_id: int, compact: Optional[bool] = None) -> WaitingListEntry:
    """
    Delete an entry and, when compacting, close the gap behind it.

    compact=None uses COMPACT_ON_REMOVE. Returns a detached copy of the
    removed entry.

    Raises:
        NotFoundError: entry does not exist
        InternalError: unexpected persistence failure
    """
    if compact is None:
        compact = COMPACT_ON_REMOVE

    with atomic(session, "remove entry"):
        entry = get_entry(session, entry_id)
        list_id = entry.waiting_list_id
        _lock_list(session, list_id)
        session.refresh(entry)
        removed = WaitingListEntry(**entry.model_dump())
        session.delete(entry)
        session.flush()

        if compact:
            _shift_positions(session, list_id, -1, lower=removed.position + 1)

    logger.info(
        "Removed entry %d from list %d at position %d%s",
        entry_id,
        list_id,
        removed.position,
        "" if compact else " (gap kept)",
    )
    return removed


def update_entry_status(session: Session, entry_id: int, status: Union[EntryStatus, str]) -> WaitingListEntry:
    """
    Set an entry's status. Positions are not affected.

    Raises:
        InvalidInputError: status outside EntryStatus
        NotFoundError: entry does not exist
    """
    try:
        new_status = EntryStatus(status.upper() if isinstance(status, str) else status)
    except ValueError as e:
        allowed = ", ".join(s.value for s in EntryStatus)
        raise InvalidInputError(f"Invalid status '{status}'. Allowed: {allowed}") from e

    with atomic(session, "update entry status"):
        entry = get_entry(session, entry_id)
        entry.status = new_status.value
        session.add(entry)

    session.refresh(entry)
    logger.info("Entry %d status set to %s", entry_id, new_status.value)
    return entry
