from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Column, DateTime
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from puppy_spa.utils.dates import utcnow

if TYPE_CHECKING:
    from puppy_spa.models.waiting_list_entry import WaitingListEntry


class WaitingList(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("date", name="uq_waitinglist_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    date: date
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Relationships
    entries: List["WaitingListEntry"] = Relationship(back_populates="waiting_list")
