"""Back-office bookkeeping models."""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.shop_service.models.enums import (
    ImportJobStatus,
    ImportJobType,
    enum_values,
)
from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column


class ImportJob(Base):
    """Progress record for one bulk import or export run."""

    __tablename__ = "import_jobs"
    __table_args__ = (
        Index("ix_import_jobs_status", "status"),
        Index("ix_import_jobs_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[ImportJobType] = mapped_column(
        SAEnum(
            ImportJobType,
            values_callable=enum_values,
            name="import_job_type_enum",
            native_enum=False,
        ),
        default=ImportJobType.IMPORT,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[ImportJobStatus] = mapped_column(
        SAEnum(
            ImportJobStatus,
            values_callable=enum_values,
            name="import_job_status_enum",
            native_enum=False,
        ),
        default=ImportJobStatus.PENDING,
    )

    total_items: Mapped[int] = mapped_column(Integer, default=0)
    processed_items: Mapped[int] = mapped_column(Integer, default=0)
    created_count: Mapped[int] = mapped_column(Integer, default=0)
    updated_count: Mapped[int] = mapped_column(Integer, default=0)
    error_count: Mapped[int] = mapped_column(Integer, default=0)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<ImportJob {self.id} {self.type} {self.status}>"
