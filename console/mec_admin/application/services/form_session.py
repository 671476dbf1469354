"""Create/edit buffer for one entity instance."""

import copy
import logging
from enum import Enum
from typing import Any

from mec_admin.domain.entities import (
    EntityFormSchema,
    GroupInstance,
    Record,
    RepeatableGroup,
    SlotRef,
    VALUE_FIELD,
    is_blank,
)
from mec_admin.domain.exceptions import SessionStateError, ValidationError

logger = logging.getLogger(__name__)


class SessionMode(str, Enum):
    """States of a form session."""

    CLOSED = "closed"
    CREATE = "create"
    EDIT = "edit"
    SUBMITTING = "submitting"


class FormSession:
    """Holds the in-progress buffer for one record.

    State machine::

        CLOSED -> CREATE | EDIT -> SUBMITTING -> CLOSED   (success)
                                             -> CREATE | EDIT (failure, buffer kept)

    Asset references are tracked by origin. References uploaded while the
    session is open belong to the session until submit succeeds; references
    copied from the persisted record still belong to that record, so when
    they are displaced they are queued and only released after a successful
    submit. ``epoch`` changes on every open/close so late asynchronous
    results can tell that the buffer they targeted is gone.
    """

    def __init__(self, schema: EntityFormSchema):
        self.schema = schema
        self.record_id: str | None = None
        self.epoch = 0
        self._mode = SessionMode.CLOSED
        self._resume_mode = SessionMode.CLOSED
        self._reset_buffer()

    def _reset_buffer(self) -> None:
        self._scalars: dict[str, Any] = {}
        self._groups: dict[str, list[GroupInstance]] = {}
        self._assets: dict[str, str | None] = {}
        self._session_refs: set[str] = set()
        self._deferred_releases: list[str] = []
        self._group_revisions: dict[str, int] = {}

    # ── Lifecycle ───────────────────────────────────────────────────

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def is_open(self) -> bool:
        return self._mode in (SessionMode.CREATE, SessionMode.EDIT)

    @property
    def is_editing(self) -> bool:
        return self.record_id is not None

    def open(self, record: Record | None = None) -> None:
        """Start a create session (``record`` is None) or an edit session."""
        if self._mode == SessionMode.SUBMITTING:
            raise SessionStateError("A submit is in progress")

        self._reset_buffer()
        self.epoch += 1

        if record is None:
            self.record_id = None
            for scalar in self.schema.scalars:
                self._scalars[scalar.name] = copy.deepcopy(scalar.default)
            for group in self.schema.groups:
                self._groups[group.name] = [
                    group.empty_instance() for _ in range(max(group.min_instances, 1))
                ]
            for slot in self.schema.asset_slots:
                self._assets[slot.name] = None
            self._mode = SessionMode.CREATE
        else:
            document = copy.deepcopy(record.fields)
            self.record_id = record.id
            for scalar in self.schema.scalars:
                self._scalars[scalar.name] = scalar.to_buffer(document.get(scalar.name))
            for group in self.schema.groups:
                instances = group.codec.to_buffer(document.get(group.name) or [])
                while len(instances) < group.min_instances:
                    instances.append(group.empty_instance())
                self._groups[group.name] = instances
            for slot in self.schema.asset_slots:
                value = document.get(slot.name)
                self._assets[slot.name] = None if is_blank(value) else value
            self._mode = SessionMode.EDIT

        logger.debug(
            "Opened %s session for %s (record=%s)",
            self._mode.value, self.schema.label, self.record_id,
        )

    def close(self) -> None:
        """Discard the buffer. Asset cleanup is the coordinator's job."""
        self._reset_buffer()
        self.record_id = None
        self.epoch += 1
        self._mode = SessionMode.CLOSED
        self._resume_mode = SessionMode.CLOSED

    def begin_submit(self) -> dict[str, Any]:
        """Validate, build the payload and enter SUBMITTING."""
        self._require_open()
        payload = self.build_payload()
        self._resume_mode = self._mode
        self._mode = SessionMode.SUBMITTING
        return payload

    def complete_submit(self) -> list[str]:
        """Close after a successful submit.

        Returns the displaced original references that are now safe to
        release, since the backend record no longer points at them.
        """
        if self._mode != SessionMode.SUBMITTING:
            raise SessionStateError("No submit in progress")
        releasable = list(self._deferred_releases)
        self.close()
        return releasable

    def fail_submit(self) -> None:
        """Return to the open state with the buffer untouched."""
        if self._mode != SessionMode.SUBMITTING:
            raise SessionStateError("No submit in progress")
        self._mode = self._resume_mode

    def _require_open(self) -> None:
        if not self.is_open:
            raise SessionStateError(f"{self.schema.label} form is not open for editing")

    # ── Scalars ─────────────────────────────────────────────────────

    def set_scalar(self, name: str, value: Any) -> None:
        self._require_open()
        self.schema.scalar(name)
        self._scalars[name] = value

    def scalar(self, name: str) -> Any:
        self.schema.scalar(name)
        return self._scalars.get(name)

    # ── Repeatable groups ───────────────────────────────────────────

    def group(self, name: str) -> list[GroupInstance]:
        """Copy of a group's instances."""
        self.schema.group(name)
        return copy.deepcopy(self._groups.get(name, []))

    def group_values(self, name: str) -> list[Any]:
        """Values of a single-field group, e.g. the company names."""
        return [instance.get(VALUE_FIELD) for instance in self._groups.get(name, [])]

    def set_group_field(self, group_name: str, index: int, field: str, value: Any) -> None:
        self._require_open()
        group = self.schema.group(group_name)
        if field not in group.field_names:
            raise KeyError(f"Group '{group_name}' has no field '{field}'")
        if field in group.asset_fields:
            raise ValueError(f"'{group_name}.{field}' is an asset slot; use the asset coordinator")
        self._instance(group, index)[field] = value

    def add_group_instance(self, group_name: str) -> int:
        """Append an empty instance and return its index."""
        self._require_open()
        group = self.schema.group(group_name)
        instances = self._groups.setdefault(group.name, [])
        instances.append(group.empty_instance())
        return len(instances) - 1

    def remove_group_instance(self, group_name: str, index: int) -> GroupInstance:
        """Remove and return the instance at ``index``.

        Raises ``ValidationError`` (group unchanged) when the removal would
        take the group below its minimum size.
        """
        self._require_open()
        group = self.schema.group(group_name)
        self._instance(group, index)
        instances = self._groups[group.name]
        if len(instances) - 1 < group.min_instances:
            raise ValidationError(
                f"{self.schema.label} needs at least {group.min_instances} "
                f"{_humanize(group.name)} entry",
                field=group.name,
            )
        removed = instances.pop(index)
        # Later instances shift down; slot addresses taken before this are stale.
        self._group_revisions[group.name] = self._group_revisions.get(group.name, 0) + 1
        return removed

    def _instance(self, group: RepeatableGroup, index: int) -> GroupInstance:
        instances = self._groups.get(group.name, [])
        if not 0 <= index < len(instances):
            raise IndexError(
                f"{group.name}[{index}] is out of range (size {len(instances)})"
            )
        return instances[index]

    # ── Asset slots ─────────────────────────────────────────────────

    def slot(self, name: str, group: str | None = None, index: int | None = None) -> SlotRef:
        """Build and check a slot address."""
        ref = SlotRef(name=name, group=group, index=index)
        self._check_slot(ref)
        return ref

    def slot_version(self, slot: SlotRef) -> tuple[int, int]:
        """Changes whenever ``slot`` may no longer address the same place.

        That is on every open/close, and for group slots whenever an
        instance of the group is removed.
        """
        revision = self._group_revisions.get(slot.group, 0) if slot.in_group else 0
        return self.epoch, revision

    def _check_slot(self, slot: SlotRef) -> None:
        if slot.in_group:
            group = self.schema.group(slot.group)
            if slot.name not in group.asset_fields:
                raise KeyError(f"'{slot.group}.{slot.name}' is not an asset slot")
            if slot.index is None:
                raise IndexError(f"Slot '{slot.group}.{slot.name}' needs an index")
            self._instance(group, slot.index)
        else:
            self.schema.asset_slot(slot.name)

    def asset(self, slot: SlotRef) -> str | None:
        self._check_slot(slot)
        if slot.in_group:
            value = self._groups[slot.group][slot.index].get(slot.name)
        else:
            value = self._assets.get(slot.name)
        return None if is_blank(value) else value

    def assign_asset(self, slot: SlotRef, reference: str) -> str | None:
        """Put a freshly uploaded reference in ``slot``; return the displaced one."""
        self._require_open()
        previous = self.asset(slot)
        self._write_slot(slot, reference)
        self._session_refs.add(reference)
        return previous

    def clear_asset(self, slot: SlotRef) -> str | None:
        """Empty ``slot``; return the reference it held."""
        self._require_open()
        previous = self.asset(slot)
        self._write_slot(slot, None)
        return previous

    def _write_slot(self, slot: SlotRef, reference: str | None) -> None:
        if slot.in_group:
            self._groups[slot.group][slot.index][slot.name] = reference or ""
        else:
            self._assets[slot.name] = reference

    def owns_upload(self, reference: str) -> bool:
        """True when ``reference`` was uploaded during this session."""
        return reference in self._session_refs

    def disown(self, reference: str) -> None:
        self._session_refs.discard(reference)

    def defer_release(self, reference: str) -> None:
        """Queue an original reference for release after a successful submit."""
        if reference not in self._deferred_releases:
            self._deferred_releases.append(reference)

    @property
    def deferred_releases(self) -> list[str]:
        return list(self._deferred_releases)

    def session_uploads_in_buffer(self) -> list[str]:
        """Session-uploaded references still present in the buffer."""
        present = []
        for slot in self.schema.asset_slots:
            value = self._assets.get(slot.name)
            if value and value in self._session_refs:
                present.append(value)
        for group in self.schema.groups:
            for instance in self._groups.get(group.name, []):
                for name in group.asset_fields:
                    value = instance.get(name)
                    if value and value in self._session_refs:
                        present.append(value)
        return present

    # ── Payload ─────────────────────────────────────────────────────

    def build_payload(self) -> dict[str, Any]:
        """Build the backend-shaped payload without mutating the buffer.

        Blank instances of ``drop_blank`` groups are stripped, groups are
        re-nested through their codec, and every required scalar, group
        field and asset slot is checked.
        """
        if self._mode == SessionMode.CLOSED:
            raise SessionStateError(f"{self.schema.label} form is not open")

        payload: dict[str, Any] = {}

        for scalar in self.schema.scalars:
            value = copy.deepcopy(self._scalars.get(scalar.name))
            if scalar.required and is_blank(value):
                raise ValidationError(
                    f"{self.schema.label} {_humanize(scalar.name)} is required",
                    field=scalar.name,
                )
            payload[scalar.name] = value

        for group in self.schema.groups:
            instances = copy.deepcopy(self._groups.get(group.name, []))
            if group.drop_blank:
                instances = [
                    instance for instance in instances
                    if not all(is_blank(instance.get(f)) for f in group.field_names)
                ]
            for position, instance in enumerate(instances):
                for name in group.required_fields:
                    if is_blank(instance.get(name)):
                        raise ValidationError(
                            f"{self.schema.label} {_humanize(group.name)} "
                            f"#{position + 1} needs a {_humanize(name)}",
                            field=f"{group.name}[{position}].{name}",
                        )
            payload[group.name] = group.codec.to_wire(instances)

        for slot in self.schema.asset_slots:
            reference = self._assets.get(slot.name)
            if slot.required and is_blank(reference):
                raise ValidationError(self.schema.missing_asset_message, field=slot.name)
            payload[slot.name] = reference or ""

        return payload


def _humanize(name: str) -> str:
    if name == VALUE_FIELD:
        return "value"
    return name.replace("_", " ")
