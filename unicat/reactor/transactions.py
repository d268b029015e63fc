"""
Execution of the planned partial updates as one transaction.

The remote API has no multi-call transactions, so they are emulated here:
the calls are executed one by one in the planned order, and the execution stops
at the first failure. If the ownership call has succeeded before the failure,
it is compensated by another ownership call with the pre-transaction owner.

The bundle call is never compensated: it is always the last one, so there is
nothing after it that could fail and require its reversal; and if it fails
itself, it has no partial effects to revert.

Every call is attempted exactly once, there are no retries. The callers decide
whether to repeat the whole update (with the state re-read and re-planned).
"""
from typing import List, Sequence

from typing_extensions import Protocol

from unicat.helpers import typedefs
from unicat.structs import outcomes, patches, states


class PartialUpdater(Protocol):
    async def __call__(self, call: patches.UpdateCall) -> None: ...


class StateReader(Protocol):
    async def __call__(self, name: str) -> states.ResourceState: ...


async def execute(
        calls: Sequence[patches.UpdateCall],
        *,
        observed: states.ResourceState,
        applier: PartialUpdater,
        logger: typedefs.Logger,
) -> outcomes.Outcome:
    """
    Execute the calls in order, stop on the first failure, compensate the owner.

    The observed state is the state before any of the calls: it is used
    to restore the owner if the ownership call needs to be compensated.
    """
    validate(calls)

    applied: List[patches.UpdateCall] = []
    for call in calls:
        try:
            await applier(call)
        except Exception as e:
            logger.error(f"Failed to update the {call.group}: {e}")
            return await compensate(
                applied=applied,
                exception=e,
                observed=observed,
                applier=applier,
                logger=logger,
            )
        else:
            logger.info(f"The {call.group} is updated: {', '.join(call.attributes)}")
            applied.append(call)

    return outcomes.Outcome(applied=applied)


async def compensate(
        *,
        applied: Sequence[patches.UpdateCall],
        exception: Exception,
        observed: states.ResourceState,
        applier: PartialUpdater,
        logger: typedefs.Logger,
) -> outcomes.Outcome:
    """
    Revert the owner if it was changed before the failure; nothing else.
    """
    owner_applied = any(call.group == patches.CallGroup.OWNER for call in applied)
    if not owner_applied:
        return outcomes.Outcome(applied=applied, exception=exception)

    if observed.owner is None:
        logger.warning("The owner cannot be rolled back: the previous owner is unknown.")
        return outcomes.Outcome(applied=applied, exception=exception)

    rollback = patches.UpdateCall.for_owner(observed.owner)
    try:
        await applier(rollback)
    except Exception as e:
        logger.error(f"Failed to roll back the owner to {observed.owner!r}: {e}")
        return outcomes.Outcome(applied=applied, exception=exception,
                                rollback=rollback, rollback_exception=e)
    else:
        logger.warning(f"The owner is rolled back to {observed.owner!r}.")
        return outcomes.Outcome(applied=applied, exception=exception, rollback=rollback)


def validate(calls: Sequence[patches.UpdateCall]) -> None:
    groups = [call.group for call in calls]
    if len(set(groups)) != len(groups):
        raise ValueError(f"Every group can be updated only once per transaction: {groups!r}")
    if patches.CallGroup.OWNER in groups and groups.index(patches.CallGroup.OWNER) != 0:
        raise ValueError(f"The owner must be updated before other attributes: {groups!r}")
