"""
Error taxonomy for pgfixture.

Infrastructure errors mean the fixture itself broke. CallbackFailed means the
fixture was healthy and the caller's own code raised.
"""

from typing import Optional


class FixtureError(Exception):
    """Base class for every error raised by pgfixture."""
    pass


class InfrastructureError(FixtureError):
    """Raised when provisioning, connecting or cleaning up fails."""
    pass


class ProvisionFailed(InfrastructureError):
    """Raised when the server container could not be created or started."""
    pass


class NotReady(InfrastructureError):
    """Raised when a server or database did not accept connections in time."""
    pass


class CreateFailed(InfrastructureError):
    """Raised when the temporary database could not be created."""
    pass


class NameCollision(CreateFailed):
    """Raised when the generated database or role name already exists."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"Database object {name!r} already exists")


class TeardownFailed(InfrastructureError):
    """Raised when a server could not be stopped or removed."""
    pass


class DropFailed(TeardownFailed):
    """Raised when the temporary database or its role could not be dropped."""
    pass


class CallbackFailed(FixtureError):
    """
    Wraps an exception raised by caller-supplied code.

    The original exception is kept untouched in ``original``.
    """

    def __init__(self, original: BaseException):
        self.original = original
        super().__init__(f"Callback raised {type(original).__name__}: {original}")


class ReadinessTimeout(FixtureError):
    """Raised by the readiness poller when the probe never succeeded."""

    def __init__(self, attempts: int, elapsed: float, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.elapsed = elapsed
        self.last_error = last_error
        message = f"Not ready after {attempts} attempt(s) in {elapsed:.2f}s"
        if last_error is not None:
            message += f"; last error: {last_error}"
        super().__init__(message)
