"""Selection of record ids for bulk operations."""

from collections.abc import Iterable


class SelectionSet:
    """Tracks which cached records are selected.

    Insertion order is kept so a bulk request lists ids in the order the
    user picked them.
    """

    def __init__(self) -> None:
        self._ids: dict[str, None] = {}

    def toggle(self, record_id: str) -> bool:
        """Flip one id. Returns True when the id is now selected."""
        if record_id in self._ids:
            del self._ids[record_id]
            return False
        self._ids[record_id] = None
        return True

    def select_all(self, record_ids: Iterable[str] | None) -> None:
        """Select exactly ``record_ids``; ``None`` clears the selection."""
        self._ids = dict.fromkeys(record_ids or ())

    def clear(self) -> None:
        self._ids.clear()

    def discard(self, record_id: str) -> None:
        self._ids.pop(record_id, None)

    def retain(self, record_ids: Iterable[str]) -> None:
        """Drop every selected id that is not in ``record_ids``."""
        keep = set(record_ids)
        self._ids = {rid: None for rid in self._ids if rid in keep}

    def is_all_selected(self, candidate_ids: Iterable[str]) -> bool:
        """Drive a "select all" checkbox. An empty candidate list is never all-selected."""
        candidates = set(candidate_ids)
        if not candidates:
            return False
        return len(self._ids) == len(candidates) and all(c in self._ids for c in candidates)

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)
