import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from stock_ledger.config import settings
from stock_ledger.models.audit_log import AuditAction, AuditLog
from stock_ledger.models.user import User

logger = logging.getLogger(__name__)


def log_action(
    db: Session,
    actor: User | None,
    action: AuditAction,
    table_affected: str,
    object_id: str | int,
    note: str = "",
) -> AuditLog:
    """Append one audit row inside the caller's transaction.

    The row is flushed but not committed. A failing write raises and the
    caller rolls back the mutation it was auditing.
    """
    entry = AuditLog(
        actor_id=actor.id if actor else None,
        action=action,
        table_affected=table_affected,
        object_id=str(object_id),
        note=note,
    )
    db.add(entry)
    db.flush()
    logger.debug("Audit %s on %s/%s by %s", action.value, table_affected, object_id, actor.username if actor else settings.SYSTEM_ACTOR_NAME)
    return entry


def list_audit_logs(db: Session, skip: int = 0, limit: int = 100, actor_id: int | None = None) -> list[AuditLog]:
    q = select(AuditLog)
    if actor_id is not None:
        q = q.where(AuditLog.actor_id == actor_id)
    q = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).offset(skip).limit(limit)
    return list(db.scalars(q).all())
