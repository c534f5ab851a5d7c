"""SQLAlchemy ORM model for the tasks table."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from tasks.domain.value_objects import DEFAULT_TASK_PRIORITY, MAX_TASK_PRIORITY_LENGTH


class TaskModel(Base, TimestampMixin):
    """ORM model for tasks table.

    Rows are always filtered by (tenant_id, user_id).
    """

    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_tenant_user", "tenant_id", "user_id"),)

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(
        String(MAX_TASK_PRIORITY_LENGTH),
        nullable=False,
        default=DEFAULT_TASK_PRIORITY,
        server_default=DEFAULT_TASK_PRIORITY,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TaskModel(id={self.id}, tenant_id={self.tenant_id})>"
