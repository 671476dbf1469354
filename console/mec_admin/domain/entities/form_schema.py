"""Form schema entities — how an entity's buffer maps to and from its wire shape.

A schema declares three kinds of form members:

* ``ScalarField``      — one value (text, number, flag, or a reference id)
* ``RepeatableGroup``  — an ordered list of same-shaped instances
* ``AssetSlot``        — a single uploaded media reference

Each repeatable group carries a ``GroupCodec`` that converts between the
backend representation and the flat instances edited in the buffer.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .record import EntityType, Record

GroupInstance = dict[str, Any]

VALUE_FIELD = "value"


def is_blank(value: Any) -> bool:
    """True for ``None`` and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


# ── Group codecs ────────────────────────────────────────────────────


class GroupCodec(ABC):
    """Converts one repeatable group between wire and buffer shapes."""

    @abstractmethod
    def to_buffer(self, wire: list[Any]) -> list[GroupInstance]:
        ...

    @abstractmethod
    def to_wire(self, instances: list[GroupInstance]) -> list[Any]:
        ...


class ValueListCodec(GroupCodec):
    """``["a", "b"]`` on the wire, ``[{"value": "a"}, ...]`` in the buffer."""

    def to_buffer(self, wire: list[Any]) -> list[GroupInstance]:
        return [{VALUE_FIELD: "" if item is None else item} for item in wire]

    def to_wire(self, instances: list[GroupInstance]) -> list[Any]:
        return [instance.get(VALUE_FIELD, "") for instance in instances]


class KeyedObjectCodec(GroupCodec):
    """``[{"name": "Acme Inc", ...}]`` on the wire, one display string per instance.

    Metadata other than ``key`` is not editable and is dropped on the way
    back; the backend re-creates it.
    """

    def __init__(self, key: str):
        self.key = key

    def to_buffer(self, wire: list[Any]) -> list[GroupInstance]:
        instances = []
        for item in wire:
            if isinstance(item, dict):
                instances.append({VALUE_FIELD: item.get(self.key, "")})
            else:
                instances.append({VALUE_FIELD: "" if item is None else item})
        return instances

    def to_wire(self, instances: list[GroupInstance]) -> list[Any]:
        return [{self.key: instance.get(VALUE_FIELD, "")} for instance in instances]


class BlockCodec(GroupCodec):
    """Multi-field blocks that keep the same field names on both sides."""

    def __init__(self, field_names: tuple[str, ...]):
        self.field_names = field_names

    def to_buffer(self, wire: list[Any]) -> list[GroupInstance]:
        instances = []
        for item in wire:
            source = item if isinstance(item, dict) else {}
            instances.append({name: source.get(name, "") for name in self.field_names})
        return instances

    def to_wire(self, instances: list[GroupInstance]) -> list[Any]:
        return [
            {name: instance.get(name, "") for name in self.field_names}
            for instance in instances
        ]


# ── Form members ────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScalarField:
    """A single-valued field. ``reference`` names the entity a foreign id points to."""

    name: str
    required: bool = False
    default: Any = ""
    reference: EntityType | None = None

    def to_buffer(self, value: Any) -> Any:
        # Populated references arrive as the referenced document.
        if self.reference is not None and isinstance(value, dict):
            return value.get("_id", value.get("id", ""))
        return self.default if value is None else value


@dataclass(frozen=True)
class RepeatableGroup:
    """An ordered list of instances edited as a unit.

    ``min_instances`` is the floor enforced by ``remove_group_instance``.
    ``required_fields`` must be non-blank on every instance at submit;
    when ``drop_blank`` is set, instances whose fields are all blank are
    stripped from the payload instead.
    """

    name: str
    codec: GroupCodec
    field_names: tuple[str, ...] = (VALUE_FIELD,)
    min_instances: int = 1
    required_fields: tuple[str, ...] = ()
    drop_blank: bool = False
    asset_fields: tuple[str, ...] = ()

    def empty_instance(self) -> GroupInstance:
        return {name: "" for name in self.field_names}


@dataclass(frozen=True)
class AssetSlot:
    """A scalar slot holding at most one uploaded media reference."""

    name: str
    required: bool = False


@dataclass(frozen=True)
class SlotRef:
    """Address of an asset slot inside a buffer.

    Scalar slots only carry ``name``; asset fields inside a group instance
    also carry ``group`` and ``index``.
    """

    name: str
    group: str | None = None
    index: int | None = None

    @property
    def in_group(self) -> bool:
        return self.group is not None


@dataclass(frozen=True)
class EntityFormSchema:
    """Everything the console needs to edit and submit one entity kind."""

    entity_type: EntityType
    label: str
    scalars: tuple[ScalarField, ...] = ()
    groups: tuple[RepeatableGroup, ...] = ()
    asset_slots: tuple[AssetSlot, ...] = ()
    missing_asset_message: str = "Please upload an image first!"
    _index: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        for member in (*self.scalars, *self.groups, *self.asset_slots):
            if member.name in self._index:
                raise ValueError(
                    f"Duplicate form member '{member.name}' in {self.entity_type.value} schema"
                )
            self._index[member.name] = member

    @property
    def plural(self) -> str:
        return self.entity_type.value

    def scalar(self, name: str) -> ScalarField:
        member = self._index.get(name)
        if not isinstance(member, ScalarField):
            raise KeyError(f"{self.label} has no scalar field '{name}'")
        return member

    def group(self, name: str) -> RepeatableGroup:
        member = self._index.get(name)
        if not isinstance(member, RepeatableGroup):
            raise KeyError(f"{self.label} has no repeatable group '{name}'")
        return member

    def asset_slot(self, name: str) -> AssetSlot:
        member = self._index.get(name)
        if not isinstance(member, AssetSlot):
            raise KeyError(f"{self.label} has no asset slot '{name}'")
        return member

    @property
    def references(self) -> tuple[ScalarField, ...]:
        return tuple(s for s in self.scalars if s.reference is not None)

    def asset_refs(self, record: Record) -> list[str]:
        """Every asset reference a persisted record owns."""
        return list(self._iter_asset_refs(record.fields))

    def _iter_asset_refs(self, document: dict[str, Any]) -> Iterator[str]:
        for slot in self.asset_slots:
            value = document.get(slot.name)
            if not is_blank(value):
                yield value
        for group in self.groups:
            if not group.asset_fields:
                continue
            for item in document.get(group.name) or []:
                if not isinstance(item, dict):
                    continue
                for name in group.asset_fields:
                    value = item.get(name)
                    if not is_blank(value):
                        yield value
