"""
The diffs of the states, field by field.

Unlike generic dict diffs, the states have the fixed set of attributes,
so the diffs are calculated only for the explicitly requested fields.

The diffs are right-scoped: only the fields declared in the right state
(the diff target, i.e. the desired state) are checked. The extra fields
in the left state (the diff source, i.e. the observed state) are ignored.
There is no "remove" operation for the same reason.
"""
import enum
from typing import Any, Iterable, Iterator, NamedTuple, Sequence

from unicat.structs import states


class DiffOperation(str, enum.Enum):
    ADD = 'add'
    CHANGE = 'change'

    def __str__(self) -> str:
        return str(self.value)


class DiffItem(NamedTuple):
    operation: DiffOperation
    field: str
    old: Any
    new: Any

    @property
    def op(self) -> DiffOperation:
        return self.operation


class Diff(tuple):  # of DiffItem
    """ An immutable sequence of the changed fields, comparable to plain tuples. """

    def __new__(cls, items: Iterable[Any] = ()) -> "Diff":
        return super().__new__(cls, (DiffItem(*item) for item in items))

    @property
    def fields(self) -> Sequence[str]:
        return tuple(item.field for item in self)


def diff_iter(
        old: states.ResourceState,
        new: states.ResourceState,
        fields: Iterable[str],
) -> Iterator[DiffItem]:
    for field in fields:
        old_value = getattr(old, field)
        new_value = getattr(new, field)
        if new_value is None:
            continue  # undeclared: nothing to compare with.
        elif old_value is None:
            yield DiffItem(DiffOperation.ADD, field, old_value, new_value)
        elif old_value != new_value:
            yield DiffItem(DiffOperation.CHANGE, field, old_value, new_value)


def diff(
        old: states.ResourceState,
        new: states.ResourceState,
        fields: Iterable[str],
) -> Diff:
    """
    Calculate the diff between two states for the requested fields only.
    """
    return Diff(diff_iter(old, new, fields))
