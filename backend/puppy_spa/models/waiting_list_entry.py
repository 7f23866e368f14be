from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime, Index
from sqlmodel import Field, Relationship, SQLModel

from puppy_spa.utils.dates import utcnow

if TYPE_CHECKING:
    from puppy_spa.models.waiting_list import WaitingList


class EntryStatus(str, Enum):
    waiting = "WAITING"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    cancelled = "CANCELLED"


class WaitingListEntry(SQLModel, table=True):
    # Positions are kept dense per list by the position manager; range shifts
    # pass through transient duplicates, so this index is not unique.
    __table_args__ = (Index("ix_waitinglistentry_list_position", "waiting_list_id", "position"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    waiting_list_id: int = Field(foreign_key="waitinglist.id", index=True)
    owner_name: Optional[str] = None
    puppy_name: Optional[str] = None
    service_required: str
    arrival_time: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    position: int
    status: str = Field(default=EntryStatus.waiting.value)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Relationship
    waiting_list: "WaitingList" = Relationship(back_populates="entries")
