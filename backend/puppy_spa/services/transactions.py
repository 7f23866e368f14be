"""
Transaction scope for service calls.

``atomic`` wraps mutations. It commits on success. On any failure the session
is rolled back, so nothing partial is ever committed, and persistence
exceptions are translated:

- domain errors (services.errors) pass through unchanged
- IntegrityError becomes ConflictError
- any other SQLAlchemyError is logged and becomes InternalError

``guarded_read`` wraps lookups and searches with the same InternalError
translation and no commit.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from puppy_spa.services.errors import ConflictError, InternalError, WaitingListError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(session: Session, action: str, conflict_message: Optional[str] = None) -> Iterator[Session]:
    try:
        yield session
        session.commit()
    except WaitingListError:
        session.rollback()
        raise
    except IntegrityError as e:
        session.rollback()
        logger.warning("Integrity conflict while trying to %s: %s", action, e.orig)
        raise ConflictError(conflict_message or f"Conflict while trying to {action}") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to %s, transaction rolled back", action)
        raise InternalError(f"Failed to {action}") from e


@contextmanager
def guarded_read(session: Session, action: str) -> Iterator[Session]:
    try:
        yield session
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to %s", action)
        raise InternalError(f"Failed to {action}") from e
