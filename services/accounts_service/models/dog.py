"""Registered service dogs and the users attached to them."""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .enums import (
    DogGender,
    DogRelationshipType,
    DogStatus,
    RelationshipStatus,
    enum_values,
)

if TYPE_CHECKING:
    from .user import User


class Dog(Base):
    """A service dog registered by its owner."""

    __tablename__ = "dogs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    registration_num: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )  # e.g. "DOG-2024-00042"
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("organizations.id"), nullable=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    breed: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    gender: Mapped[Optional[DogGender]] = mapped_column(
        SAEnum(
            DogGender,
            name="dog_gender_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=True,
    )
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # lbs
    color: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    microchip_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    status: Mapped[DogStatus] = mapped_column(
        SAEnum(
            DogStatus,
            name="dog_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=DogStatus.IN_TRAINING,
        nullable=False,
    )
    status_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    training_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    training_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    public_profile: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    show_in_directory: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    owner: Mapped["User"] = relationship("User", foreign_keys=[owner_id])
    relationships: Mapped[list["DogUserRelationship"]] = relationship(
        "DogUserRelationship",
        back_populates="dog",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Dog {self.registration_num} {self.name} ({self.status})>"


class DogUserRelationship(Base):
    """A user other than the owner attached to a dog, with what they may do.

    ``can_view_profile`` lets the user read the dog's full record and
    ``can_manage_dogs`` lets them change its status. Declined invitations
    grant nothing.
    """

    __tablename__ = "dog_user_relationships"
    __table_args__ = (
        UniqueConstraint(
            "dog_id", "user_id", "relationship_type", name="uq_dog_user_relationship"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    dog_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("dogs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    relationship_type: Mapped[DogRelationshipType] = mapped_column(
        SAEnum(
            DogRelationshipType,
            name="dog_relationship_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    status: Mapped[RelationshipStatus] = mapped_column(
        SAEnum(
            RelationshipStatus,
            name="relationship_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=RelationshipStatus.PENDING,
        nullable=False,
    )

    can_view_profile: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true", nullable=False
    )
    can_edit_profile: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )
    can_manage_dogs: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    responded_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    dog: Mapped["Dog"] = relationship("Dog", back_populates="relationships")
    user: Mapped["User"] = relationship("User", lazy="selectin")

    def __repr__(self):
        return (
            f"<DogUserRelationship {self.relationship_type} "
            f"dog={self.dog_id} user={self.user_id}>"
        )
