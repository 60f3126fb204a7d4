"""Facet result buckets."""

from typing import Any, Dict, List, Optional


class Result:
    """A single facet bucket: one selectable value and its document count."""

    def __init__(
        self,
        raw_value: str,
        display_value: Optional[str] = None,
        count: int = 0,
        active: bool = False
    ):
        """Initialize a result.

        Args:
            raw_value: Backend value of the bucket, used for filtering
            display_value: Label shown to users, defaults to the raw value
            count: Number of documents in the bucket
            active: Whether the bucket is currently used as a filter
        """
        self.raw_value = str(raw_value)
        self.display_value = self.raw_value if display_value is None else str(display_value)
        self.count = int(count)
        self.active = active
        self.url: Optional[str] = None
        self.children: List["Result"] = []

    def set_count(self, count: int) -> None:
        self.count = int(count)

    def set_active_state(self, active: bool) -> None:
        self.active = active

    def set_url(self, url: Optional[str]) -> None:
        self.url = url

    def set_children(self, children: List["Result"]) -> None:
        self.children = list(children)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a plain dictionary."""
        data = {
            "raw_value": self.raw_value,
            "display_value": self.display_value,
            "count": self.count,
            "active": self.active,
            "url": self.url,
        }
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    # Mutable and compared by value, so not usable as a dict key.
    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"Result(raw_value={self.raw_value!r}, display_value={self.display_value!r}, "
            f"count={self.count}, active={self.active})"
        )
