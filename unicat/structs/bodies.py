"""
All the structures coming from/to the catalog API.

For strict type-checking, they are detailed to the per-field level
(e.g. `TypedDict` instead of just ``Mapping[Any, Any]``) --
as used by the library. The API can return arbitrary extra fields
at runtime, which are not declared here and are ignored when parsed.

The encryption details are not detailed on purpose: they are passed
through as an opaque nested mapping, both when read and when patched.
"""
from typing import Any, Collection, Mapping

from typing_extensions import TypedDict


class RawLocation(TypedDict, total=False):
    name: str
    url: str
    credential_name: str
    comment: str
    owner: str
    read_only: bool
    access_point: str
    encryption_details: Mapping[str, Any]
    metastore_id: str
    created_at: int
    created_by: str
    updated_at: int
    updated_by: str


class RawLocationPatch(TypedDict, total=False):
    url: str
    credential_name: str
    comment: str
    owner: str
    read_only: bool
    access_point: str
    encryption_details: Mapping[str, Any]
    force: bool


class RawErrorDetail(TypedDict, total=False):
    reason: str
    domain: str
    metadata: Mapping[str, str]


class RawError(TypedDict, total=False):
    error_code: str
    message: str
    details: Collection[RawErrorDetail]
