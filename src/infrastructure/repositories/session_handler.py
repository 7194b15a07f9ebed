"""
Context manager for handling database sessions and exceptions.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.infrastructure.database.operations import DatabaseManager, get_db_manager
from src.infrastructure.utilities.exceptions import DatabaseError

logger = logging.getLogger(__name__)


@contextmanager
def managed_session(db_manager: Optional[DatabaseManager] = None) -> Generator[Session, None, None]:
    """
    Context manager for handling database sessions, including commits, rollbacks,
    and exception logging.

    Yields:
        Session: The SQLAlchemy session object.

    Raises:
        DatabaseError: If a database-related error occurs.
    """
    session = (db_manager or get_db_manager()).get_session()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        logger.error("💥 DATABASE ERROR: %s", e)
        session.rollback()
        raise DatabaseError(str(e)) from e
    except Exception as e:
        logger.error("💥 UNEXPECTED ERROR: %s", e)
        session.rollback()
        raise
    finally:
        session.close()
