"""Enum definitions for accounts service models."""

import enum

from libs.auth.roles import Role  # noqa: F401


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class AgreementType(str, enum.Enum):
    """Consent records a user can accept."""

    TRAINING_BEHAVIOR_STANDARDS = "TRAINING_BEHAVIOR_STANDARDS"
    TERMS_OF_SERVICE = "TERMS_OF_SERVICE"
    PRIVACY_POLICY = "PRIVACY_POLICY"
    TRAINER_AGREEMENT = "TRAINER_AGREEMENT"


class AccountType(str, enum.Enum):
    INDIVIDUAL = "INDIVIDUAL"
    PROFESSIONAL = "PROFESSIONAL"
    ORGANIZATION = "ORGANIZATION"


class DogStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    IN_TRAINING = "IN_TRAINING"
    RETIRED = "RETIRED"
    WASHED_OUT = "WASHED_OUT"
    IN_MEMORIAM = "IN_MEMORIAM"


class DogGender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    MALE_NEUTERED = "MALE_NEUTERED"
    FEMALE_SPAYED = "FEMALE_SPAYED"


class DogRelationshipType(str, enum.Enum):
    """How a user other than the owner is attached to a dog."""

    HANDLER = "HANDLER"
    TRAINER = "TRAINER"
    AIDE = "AIDE"
    EMERGENCY_CONTACT = "EMERGENCY_CONTACT"


class RelationshipStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
