from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stock_ledger.database import get_db
from stock_ledger.schemas.audit_log import AuditLogOut
from stock_ledger.services import audit_service

router = APIRouter(prefix="/audit-logs", tags=["Audit Logs"])


@router.get("", response_model=list[AuditLogOut])
def list_audit_logs(skip: int = 0, limit: int = 100, actor_id: int | None = None, db: Session = Depends(get_db)):
    return audit_service.list_audit_logs(db, skip=skip, limit=limit, actor_id=actor_id)
