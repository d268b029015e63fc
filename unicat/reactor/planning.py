"""
Planning of the partial updates from the observed & desired states.

The remote API cannot change the owner together with other attributes
in one atomic call, so one logical update is split into up to two calls:

* The ownership call: only the owner, if it has changed.
* The bundle call: all the declared non-owner attributes, if any of them
  has changed. It is the full bundle, not the diff: the remote API replaces
  the bundle as a whole.

The ownership call always goes first: the new owner might grant (or revoke)
the permissions needed for the bundle call. This also defines the direction
of the rollback if the bundle call fails (see `transactions`).
"""
from typing import List, Sequence

from unicat.helpers import typedefs
from unicat.structs import diffs, patches, states


def plan(
        observed: states.ResourceState,
        desired: states.ResourceState,
        *,
        logger: typedefs.Logger,
) -> Sequence[patches.UpdateCall]:
    """
    Decide which calls are needed to bring the observed state to the desired.

    Returns 0, 1, or 2 calls, in the order of execution.
    """
    calls: List[patches.UpdateCall] = []

    owner_diff = diffs.diff(observed, desired, fields=[states.OWNERSHIP_FIELD])
    if owner_diff and desired.owner is not None:
        logger.debug(f"The owner has changed: {observed.owner!r} -> {desired.owner!r}")
        calls.append(patches.UpdateCall.for_owner(desired.owner))

    bundle_diff = diffs.diff(observed, desired, fields=states.BUNDLE_FIELDS)
    if bundle_diff:
        logger.debug(f"The attributes have changed: {', '.join(bundle_diff.fields)}")
        calls.append(patches.UpdateCall.for_bundle(desired.bundle, force=desired.force_update))

    return calls
