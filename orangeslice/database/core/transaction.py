# orangeslice/database/core/transaction.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from orangeslice.common.logging import get_logger

logger = get_logger(__name__)


@contextmanager
def transactional(sessions: sessionmaker[Session]) -> Iterator[Session]:
    """
    Fresh session inside one transaction. Pending rows are flushed before the
    commit so constraint violations surface here, and any failure rolls the
    whole unit back.
    """
    with sessions() as db, db.begin():
        try:
            yield db
            db.flush()
        except SQLAlchemyError as e:
            logger.warning("Rolling back: %s", getattr(e, "orig", None) or e)
            raise
