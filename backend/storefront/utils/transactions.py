from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def smart_transaction(session: Session) -> Iterator[Session]:
    """
    Run a block of writes as one unit on the given Session.

    If the session already has a transaction open (it autobegins on the first
    query), the block runs inside a SAVEPOINT (begin_nested) and the caller is
    expected to commit the outer transaction. Otherwise a plain transaction is
    started and committed when the block exits cleanly.

    Any exception rolls the block back and propagates.

    Usage:
        with smart_transaction(db):
            ... DB writes ...
        db.commit()
    """
    if session.in_transaction():
        cm = session.begin_nested()
    else:
        cm = session.begin()
    with cm:
        yield session
