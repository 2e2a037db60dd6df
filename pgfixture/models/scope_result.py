"""
Scope result model.

A ScopeResult has two slots that are always populated: the primary outcome
(the callback's value, or the error that ended the scope) and the teardown
outcome (the list of errors raised while releasing resources, empty when
cleanup succeeded). Neither slot ever overwrites the other.
"""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from pgfixture.errors import CallbackFailed, FixtureError, InfrastructureError, TeardownFailed

T = TypeVar("T")


@dataclass(frozen=True)
class ScopeResult(Generic[T]):
    """Outcome of running a callback inside a scope."""

    value: Optional[T] = None
    error: Optional[FixtureError] = None
    teardown_errors: List[TeardownFailed] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the callback returned and teardown was clean."""
        return self.error is None and not self.teardown_errors

    @property
    def callback_failed(self) -> bool:
        """True when the caller's own code raised."""
        return isinstance(self.error, CallbackFailed)

    @property
    def infrastructure_failed(self) -> bool:
        """True when setup or teardown of the fixture itself failed."""
        return isinstance(self.error, InfrastructureError) or bool(self.teardown_errors)

    @property
    def teardown_failed(self) -> bool:
        return bool(self.teardown_errors)

    @property
    def original_error(self) -> Optional[BaseException]:
        """The caller's exception when the callback failed."""
        if isinstance(self.error, CallbackFailed):
            return self.error.original
        return None

    def unwrap(self) -> T:
        """
        Return the callback's value.

        Raises:
            FixtureError: the primary error if there is one, otherwise the
                first teardown error
        """
        if self.error is not None:
            raise self.error
        if self.teardown_errors:
            raise self.teardown_errors[0]
        return self.value

    def __repr__(self) -> str:
        if self.ok:
            return f"ScopeResult(ok, value={self.value!r})"
        return f"ScopeResult(error={self.error!r}, teardown_errors={self.teardown_errors!r})"
