"""Accounts Service models package.

Re-exports all models and enums so that:
  - ``from services.accounts_service.models import User`` works
  - Alembic env.py sees every table through one import
  - SQLAlchemy's mapper registry sees every model class on import

Model definitions are split across:
  - models/organization.py  tenants
  - models/user.py          users and their profile fields
  - models/agreement.py     accepted agreements
  - models/dog.py           service dogs and the users attached to them
"""

from services.accounts_service.models.agreement import Agreement  # noqa: F401
from services.accounts_service.models.dog import Dog, DogUserRelationship  # noqa: F401
from services.accounts_service.models.enums import (  # noqa: F401
    AccountType,
    AgreementType,
    DogGender,
    DogRelationshipType,
    DogStatus,
    RelationshipStatus,
    Role,
)
from services.accounts_service.models.organization import Organization  # noqa: F401
from services.accounts_service.models.user import User  # noqa: F401

__all__ = [
    "AccountType",
    "Agreement",
    "AgreementType",
    "Dog",
    "DogGender",
    "DogRelationshipType",
    "DogStatus",
    "DogUserRelationship",
    "Organization",
    "RelationshipStatus",
    "Role",
    "User",
]
