"""
Validation for the free-text fields of a waiting list entry.

An entry must identify who is waiting: at least one of owner_name and
puppy_name, and always the service required. Blank strings count as missing.
The result is returned as data so callers decide how to report it.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class EntryValidationResult:
    owner_name: Optional[str]
    puppy_name: Optional[str]
    service_required: Optional[str]
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_entry_fields(
    owner_name: Optional[str], puppy_name: Optional[str], service_required: Optional[str]
) -> EntryValidationResult:
    result = EntryValidationResult(
        owner_name=clean_text(owner_name),
        puppy_name=clean_text(puppy_name),
        service_required=clean_text(service_required),
    )
    if result.owner_name is None and result.puppy_name is None:
        result.errors.append("Either owner_name or puppy_name must be provided")
    if result.service_required is None:
        result.errors.append("service_required must not be empty")
    return result
