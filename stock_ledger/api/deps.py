from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from stock_ledger.database import get_db
from stock_ledger.models.user import User
from stock_ledger.services import lookup_service


def get_current_actor(x_actor: str | None = Header(default=None), db: Session = Depends(get_db)) -> User | None:
    """Resolve the X-Actor header to a user. No header means a system action."""
    if not x_actor:
        return None
    actor = lookup_service.get_actor_by_username(db, x_actor)
    if not actor:
        raise HTTPException(404, f"Actor '{x_actor}' not found")
    return actor
