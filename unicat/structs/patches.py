"""
All the structures needed for the partial updates of the locations.

The remote API accepts a JSON body with the fields to override; the absent
fields remain as they are. However, the API does not allow mixing the owner
change with other changes reliably, so every patch belongs to one group only:
either the ownership, or the bundle of all other attributes.
"""
import dataclasses
import enum
from typing import Any, Mapping

from unicat.structs import bodies, states


class CallGroup(str, enum.Enum):
    OWNER = 'owner'
    BUNDLE = 'bundle'

    def __str__(self) -> str:
        return str(self.value)


@dataclasses.dataclass(frozen=True)
class UpdateCall:
    """
    A single partial update of one group of attributes.

    The calls are constructed anew for every update cycle, and are discarded
    once executed. They carry no state of the execution themselves.
    """
    group: CallGroup
    attributes: Mapping[str, Any]
    force: bool = False

    @classmethod
    def for_owner(cls, owner: str) -> "UpdateCall":
        return cls(group=CallGroup.OWNER, attributes={states.OWNERSHIP_FIELD: owner})

    @classmethod
    def for_bundle(cls, attributes: Mapping[str, Any], *, force: bool = False) -> "UpdateCall":
        unexpected = set(attributes) - set(states.BUNDLE_FIELDS)
        if unexpected:
            raise ValueError(f"Not the bundle attributes: {sorted(unexpected)!r}")
        return cls(group=CallGroup.BUNDLE, attributes=dict(attributes), force=force)

    def as_payload(self) -> bodies.RawLocationPatch:
        payload = bodies.RawLocationPatch(**self.attributes)  # type: ignore
        if self.force:
            payload['force'] = True
        return payload
