"""
The update cycle of a location: read, plan, execute, re-read.

`update` is the entry point of the transaction itself: it takes the states
and the collaborator to apply the calls with, and does no reading.

`reconcile` wraps it into the full cycle with the state read fresh before
the transaction (never cached across the cycles) and re-read after it --
to reconcile with whatever partial effects actually persisted remotely.

`update_location` & `plan_location` do the same with the catalog API.
"""
import dataclasses
from typing import Optional, Sequence

from unicat.clients import fetching, patching, sessions
from unicat.helpers import typedefs
from unicat.reactor import planning, transactions
from unicat.structs import configuration, outcomes, patches, references, states


@dataclasses.dataclass(frozen=True)
class UpdateResult:
    outcome: outcomes.Outcome
    state: Optional[states.ResourceState]  # None if it could not be re-read after a failure.


async def update(
        desired: states.ResourceState,
        observed: states.ResourceState,
        *,
        applier: transactions.PartialUpdater,
        logger: typedefs.Logger,
) -> outcomes.Outcome:
    if desired.name != observed.name:
        raise ValueError(f"Mismatching locations: {desired.name!r} != {observed.name!r}")

    calls = planning.plan(observed, desired, logger=logger)
    if not calls:
        logger.debug("Nothing to update.")
        return outcomes.Outcome()

    return await transactions.execute(calls, observed=observed, applier=applier, logger=logger)


async def reconcile(
        desired: states.ResourceState,
        *,
        reader: transactions.StateReader,
        applier: transactions.PartialUpdater,
        logger: typedefs.Logger,
) -> UpdateResult:
    observed = await reader(desired.name)
    outcome = await update(desired, observed, applier=applier, logger=logger)

    # If not updated, the re-reading is just informational: the transaction's error prevails.
    try:
        state = await reader(desired.name)
    except Exception as e:
        if outcome.succeeded:
            raise
        logger.error(f"Failed to re-read the state after a failed update: {e}")
        state = None

    return UpdateResult(outcome=outcome, state=state)


async def update_location(
        *,
        name: str,
        desired: states.ResourceState,
        context: sessions.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
        resource: references.Resource = references.EXTERNAL_LOCATIONS,
) -> UpdateResult:

    async def reader(name: str) -> states.ResourceState:
        return await fetching.read_location(
            name=name,
            resource=resource,
            context=context,
            settings=settings,
            logger=logger,
        )

    async def applier(call: patches.UpdateCall) -> None:
        await patching.patch_location(
            name=name,
            call=call,
            resource=resource,
            context=context,
            settings=settings,
            logger=logger,
        )

    if desired.name != name:
        raise ValueError(f"The desired state is for {desired.name!r}, not for {name!r}.")
    return await reconcile(desired, reader=reader, applier=applier, logger=logger)


async def plan_location(
        *,
        name: str,
        desired: states.ResourceState,
        context: sessions.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
        resource: references.Resource = references.EXTERNAL_LOCATIONS,
) -> Sequence[patches.UpdateCall]:
    """ Read the current state and plan the calls, but do not execute them. """
    if desired.name != name:
        raise ValueError(f"The desired state is for {desired.name!r}, not for {name!r}.")
    observed = await fetching.read_location(
        name=name,
        resource=resource,
        context=context,
        settings=settings,
        logger=logger,
    )
    return planning.plan(observed, desired, logger=logger)
