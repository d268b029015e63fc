"""
The in-memory outcomes of the multi-call update transactions.

An outcome reports only the success or failure of the transaction's own calls.
It does not guess the resulting remote state: after any outcome, the state
must be re-read from the server to see which effects actually persisted.
"""
import dataclasses
import enum
from typing import Optional, Sequence

from unicat.structs import patches


class UpdateError(Exception):
    """ A base for the errors of the update transactions (not of the calls). """


class OwnerRollbackError(UpdateError):
    """
    An update failed, and the ownership could not be reverted either.

    The message always starts with the original error's message verbatim,
    so that the callers checking for the original cause keep working.
    """

    def __init__(self, primary: Exception, rollback: Exception) -> None:
        super().__init__(f"{primary}. Owner rollback also failed: {rollback}")
        self.primary = primary
        self.rollback = rollback


class OutcomeKind(enum.Enum):
    SUCCESS = enum.auto()
    FAILED = enum.auto()
    FAILED_WITH_ROLLBACK_FAILURE = enum.auto()


@dataclasses.dataclass(frozen=True)
class Outcome:
    applied: Sequence[patches.UpdateCall] = ()
    exception: Optional[Exception] = None
    rollback: Optional[patches.UpdateCall] = None  # the compensating call, if attempted.
    rollback_exception: Optional[Exception] = None

    @property
    def kind(self) -> OutcomeKind:
        if self.exception is None:
            return OutcomeKind.SUCCESS
        elif self.rollback_exception is None:
            return OutcomeKind.FAILED
        else:
            return OutcomeKind.FAILED_WITH_ROLLBACK_FAILURE

    @property
    def succeeded(self) -> bool:
        return self.exception is None

    @property
    def rolled_back(self) -> bool:
        return self.rollback is not None and self.rollback_exception is None

    @property
    def error(self) -> Optional[Exception]:
        """ The error to report to the caller, if any. """
        if self.exception is None:
            return None
        elif self.rollback_exception is None:
            return self.exception
        else:
            return OwnerRollbackError(self.exception, self.rollback_exception)

    @property
    def message(self) -> Optional[str]:
        error = self.error
        return None if error is None else str(error)

    def raise_for_failure(self) -> None:
        error = self.error
        if error is None:
            pass
        elif error is self.exception:
            raise error
        else:
            raise error from self.rollback_exception
