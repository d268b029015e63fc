"""
The states of the external locations: as observed remotely & as desired.

Both kinds of state have the same fixed set of attributes, split into groups:

* The identifier (``name``): never compared, never patched.
* The ownership (``owner``): patched with a dedicated call.
* The bundle (``url``, ``credential_name``, etc): patched in one call.
* The flags (``force_update``): only affect how the bundle is patched.
* The computed fields (``metastore_id``, ``created_at``, etc): reported
  by the server, never compared, never patched.

``None`` as a value means that the attribute is not declared (for the desired
state), or that the attribute is not reported by the server (for the observed
state). The undeclared desired attributes are ignored in the comparison.
"""
import dataclasses
import io
import os
from typing import IO, Any, Mapping, Optional, Tuple, Union

import yaml

from unicat.structs import bodies

OWNERSHIP_FIELD = 'owner'
BUNDLE_FIELDS: Tuple[str, ...] = (
    'url',
    'credential_name',
    'comment',
    'read_only',
    'access_point',
    'encryption_details',
)
FLAG_FIELDS: Tuple[str, ...] = ('force_update',)
COMPUTED_FIELDS: Tuple[str, ...] = (
    'metastore_id',
    'created_at',
    'created_by',
    'updated_at',
    'updated_by',
)


@dataclasses.dataclass(frozen=True)
class ResourceState:
    name: str

    # Ownership.
    owner: Optional[str] = None

    # The bundle.
    url: Optional[str] = None
    credential_name: Optional[str] = None
    comment: Optional[str] = None
    read_only: Optional[bool] = None
    access_point: Optional[str] = None
    encryption_details: Optional[Mapping[str, Any]] = None

    # Flags.
    force_update: bool = False

    # Computed by the server.
    metastore_id: Optional[str] = None
    created_at: Optional[int] = None
    created_by: Optional[str] = None
    updated_at: Optional[int] = None
    updated_by: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: bodies.RawLocation, *, name: Optional[str] = None) -> "ResourceState":
        """
        Parse the server's response, ignoring the unknown fields.

        Some responses do not contain the name (e.g. partial ones); then,
        the explicitly passed name is used.
        """
        known = (OWNERSHIP_FIELD,) + BUNDLE_FIELDS + COMPUTED_FIELDS
        values = {key: raw[key] for key in known if raw.get(key) is not None}  # type: ignore
        return cls(name=raw.get('name') or name or '', **values)

    @property
    def bundle(self) -> Mapping[str, Any]:
        """ All declared (non-``None``) attributes of the bundle group. """
        values = {field: getattr(self, field) for field in BUNDLE_FIELDS}
        return {field: value for field, value in values.items() if value is not None}

    def as_raw(self) -> bodies.RawLocation:
        raw = bodies.RawLocation(name=self.name)
        for field in (OWNERSHIP_FIELD,) + BUNDLE_FIELDS + COMPUTED_FIELDS:
            value = getattr(self, field)
            if value is not None:
                raw[field] = value  # type: ignore
        return raw


def load_desired(
        source: Union[str, "os.PathLike[str]", IO[str]],
        *,
        name: str,
) -> ResourceState:
    """
    Load the desired state from a YAML document (a file path or a stream).

    The document is a mapping of the attributes, where only the declarable
    attributes are accepted: the ownership, the bundle, and the flags.
    The name in the document, if present, must match the requested name.
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, encoding='utf-8') as f:
            data = yaml.safe_load(f)
    else:
        data = yaml.safe_load(source)

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValueError(f"The desired state must be a mapping, got {type(data).__name__}.")

    declarable = {'name', OWNERSHIP_FIELD} | set(BUNDLE_FIELDS) | set(FLAG_FIELDS)
    unknown = set(data) - declarable
    if unknown:
        raise ValueError(f"Unsupported attributes in the desired state: {sorted(unknown)!r}")

    declared_name = data.get('name', name)
    if declared_name != name:
        raise ValueError(f"The desired state is for {declared_name!r}, not for {name!r}.")

    values = {key: val for key, val in data.items() if key != 'name'}
    force_update = values.get('force_update', False)
    if not isinstance(force_update, bool):
        raise ValueError(f"The force_update flag must be true or false, got {force_update!r}.")
    values['force_update'] = force_update
    return ResourceState(name=name, **values)


def dump_state(state: ResourceState) -> str:
    """ Render the state as YAML, e.g. as a template for the desired state. """
    stream = io.StringIO()
    yaml.safe_dump(dict(state.as_raw()), stream, default_flow_style=False, sort_keys=True)
    return stream.getvalue()
