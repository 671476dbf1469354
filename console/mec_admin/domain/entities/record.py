"""Domain entity — an opaque backend record as cached by the console."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EntityType(str, Enum):
    """Record kinds managed by the admin console."""

    BANNERS = "banners"
    CLIENTS = "clients"
    PROJECTS = "projects"
    WORKS = "works"
    REVIEWS = "reviews"
    SUBSCRIBERS = "subscribers"
    ENQUIRIES = "enquiries"


@dataclass
class Record:
    """A single backend record.

    ``fields`` holds the document exactly as the API returned it; the
    entity's form schema decides which keys are scalars, repeatable
    groups or asset references.
    """

    id: str
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_wire(cls, document: dict[str, Any]) -> "Record":
        """Build a record from an API document (``_id`` first, then ``id``)."""
        record_id = document.get("_id", document.get("id"))
        if record_id is None:
            raise ValueError("Record document has no '_id' or 'id'")
        return cls(id=str(record_id), fields=dict(document))

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)
