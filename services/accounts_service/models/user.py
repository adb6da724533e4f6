"""User accounts: identity, role, and the profile fields behind completion."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from libs.auth.roles import Role
from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .enums import AccountType, enum_values

if TYPE_CHECKING:
    from .agreement import Agreement
    from .organization import Organization


class User(Base):
    """A registered handler, trainer, aide or administrator.

    ``profile_complete`` is a cached copy of the completion percentage for
    listings and stats. It is overwritten on every profile write, login and
    agreement acceptance, and never consulted for authorization.
    """

    __tablename__ = "users"

    # Identity
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    auth_id: Mapped[str] = mapped_column(
        String, unique=True, index=True, nullable=False
    )  # "sub" claim from the auth provider
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    member_number: Mapped[Optional[str]] = mapped_column(
        String(20), unique=True, nullable=True
    )  # e.g. "SDS-2024-0042"
    organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("organizations.id"), nullable=True, index=True
    )

    role: Mapped[Role] = mapped_column(
        SAEnum(
            Role,
            name="user_role_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=Role.HANDLER,
        nullable=False,
    )
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(
            AccountType,
            name="account_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=AccountType.INDIVIDUAL,
        nullable=False,
    )

    # Profile (completion checklist)
    first_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(
        String, nullable=True
    )  # storage URL or key
    address: Mapped[Optional[dict]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=True
    )  # {"street", "city", "state", "zip_code", "country"}
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email_verified: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    profile_complete: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )

    # Professional / directory
    business_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    # Privacy
    public_profile: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    public_email: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    public_phone: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    show_in_directory: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    organization: Mapped[Optional["Organization"]] = relationship(
        "Organization", back_populates="users", lazy="selectin"
    )
    agreements: Mapped[list["Agreement"]] = relationship(
        "Agreement",
        back_populates="user",
        lazy="selectin",
        order_by="Agreement.accepted_at.desc()",
        foreign_keys="Agreement.user_id",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
