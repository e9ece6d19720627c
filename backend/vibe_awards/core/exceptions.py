"""Custom exception classes for the application.

Every exception carries the HTTP status it maps to; the handlers in
vibe_awards.core.error_handlers render them as {"error": message}.
"""


class VibeAwardsException(Exception):
    """Base exception for all Vibe Awards errors."""

    status_code: int = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(VibeAwardsException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: object = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found")


class ValidationFailedError(VibeAwardsException):
    """Raised when a request is well-formed but semantically invalid."""

    status_code = 400


class IdentityUnavailableError(ValidationFailedError):
    """Raised when neither a verified user nor a client address is known."""

    def __init__(self):
        super().__init__("Unable to determine client identity")


class AlreadyActedError(VibeAwardsException):
    """Raised when an identity repeats a one-shot engagement action."""

    status_code = 400


class AlreadyNominatedError(AlreadyActedError):
    def __init__(self):
        super().__init__("Already nominated this app")


class AlreadyVotedError(AlreadyActedError):
    def __init__(self):
        super().__init__("Already voted in this battle")


class AlreadyInterestedError(AlreadyActedError):
    def __init__(self):
        super().__init__("Already expressed interest in this post")


class InvalidTargetError(VibeAwardsException):
    """Raised when an engagement action points at something it cannot target."""

    status_code = 400


class InvalidSubmissionError(InvalidTargetError):
    """Raised when a vote names an app that is not part of the battle."""

    def __init__(self):
        super().__init__("app_id is not part of this battle")


class BattleClosedError(InvalidTargetError):
    """Raised when voting in a battle that is not active."""

    def __init__(self, status: str):
        self.battle_status = status
        super().__init__(f"Battle is not open for voting (status: {status})")


class AuthenticationRequiredError(VibeAwardsException):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class PermissionDeniedError(VibeAwardsException):
    status_code = 403

    def __init__(self, message: str = "Not allowed to modify this resource"):
        super().__init__(message)


class RateLimitError(VibeAwardsException):
    """Raised when a client exceeds its request budget."""

    status_code = 429

    def __init__(self):
        super().__init__("Too many requests, please try again later")


class StoreError(VibeAwardsException):
    """A store failure that is not a recognised constraint outcome.

    The client only ever sees an opaque message; the cause is logged.
    """

    status_code = 500

    def __init__(self, cause: Exception | None = None):
        self.cause = cause
        super().__init__("Database error")
