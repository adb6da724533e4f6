"""Domain errors raised by the accounts service layer.

Routers translate these into HTTP responses; the service functions stay
free of FastAPI.
"""


class AccountsError(Exception):
    """Base class for accounts service errors."""


class UserNotFoundError(AccountsError, LookupError):
    def __init__(self, user_ref):
        super().__init__(f"User {user_ref} not found")
        self.user_ref = user_ref


class UserAlreadyRegisteredError(AccountsError):
    pass


class AgreementConflictError(AccountsError):
    """Concurrent acceptances kept conflicting; the caller should retry later."""

    def __init__(self, agreement_type, attempts: int):
        super().__init__(
            f"Could not record {agreement_type} acceptance after {attempts} attempts. "
            "Please try again."
        )
        self.agreement_type = agreement_type
        self.attempts = attempts
