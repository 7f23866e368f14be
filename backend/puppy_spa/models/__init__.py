from puppy_spa.models.waiting_list import WaitingList
from puppy_spa.models.waiting_list_entry import EntryStatus, WaitingListEntry

__all__ = [
    "WaitingList",
    "WaitingListEntry",
    "EntryStatus",
]
