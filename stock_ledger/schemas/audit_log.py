from datetime import datetime

from pydantic import BaseModel

from stock_ledger.models.audit_log import AuditAction


class AuditLogOut(BaseModel):
    id: int
    actor_id: int | None
    action: AuditAction
    table_affected: str
    object_id: str
    note: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
