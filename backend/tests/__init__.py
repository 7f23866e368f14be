# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from puppy_spa.models.waiting_list import WaitingList  # noqa: F401
from puppy_spa.models.waiting_list_entry import WaitingListEntry  # noqa: F401
