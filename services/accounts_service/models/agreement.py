"""Versioned consent records accepted by users."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, Uuid, text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .enums import AgreementType, enum_values

if TYPE_CHECKING:
    from .user import User


class Agreement(Base):
    """An accepted agreement.

    At most one record per (user, type) is active. Accepting again
    deactivates the previous record and links it to its replacement; records
    are never deleted so the acceptance history is preserved.
    """

    __tablename__ = "agreements"
    __table_args__ = (
        Index(
            "uq_agreements_one_active_per_type",
            "user_id",
            "type",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[AgreementType] = mapped_column(
        SAEnum(
            AgreementType,
            name="agreement_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    version: Mapped[str] = mapped_column(String(20), nullable=False)  # e.g. "2024.1"
    # Shape varies by type and over time; older records must stay readable
    content: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict
    )

    accepted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true", nullable=False
    )

    # Supersession
    superseded_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("agreements.id", ondelete="SET NULL"), nullable=True
    )
    superseded_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="agreements", foreign_keys=[user_id]
    )

    def __repr__(self):
        return f"<Agreement {self.type} v{self.version} active={self.is_active}>"
