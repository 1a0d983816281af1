from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from stock_ledger.database import Base


class AuditAction(str, PyEnum):
    CREATE_PRODUCT = "CREATE_PRODUCT"
    CREATE_WAREHOUSE = "CREATE_WAREHOUSE"
    CREATE_ZONE = "CREATE_ZONE"
    ADJUST_INVENTORY = "ADJUST_INVENTORY"
    MOVE_INVENTORY = "MOVE_INVENTORY"


class AuditLog(Base):
    """Generic append-only trail of who changed what."""

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actor_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    action: Mapped[AuditAction] = mapped_column(
        Enum(AuditAction, values_callable=lambda x: [e.value for e in x], length=50),
        nullable=False,
    )
    table_affected: Mapped[str] = mapped_column(String(50), nullable=False)
    object_id: Mapped[str] = mapped_column(String(50), nullable=False)
    note: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
