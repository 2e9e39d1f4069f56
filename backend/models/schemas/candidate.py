"""Untrusted, loosely-typed wrapper around whatever JSON the model produced."""

from typing import Any


class CandidateObject:
    """A decoded JSON value of unknown shape.

    Only optional accessors are exposed; each returns ``None`` when the
    field is missing. Values are passed through untyped, so callers
    (the result normalizer) must coerce them. When the payload is a
    sequence its first element is authoritative and the rest is ignored.
    """

    __slots__ = ("_fields",)

    def __init__(self, payload: Any) -> None:
        if isinstance(payload, (list, tuple)):
            payload = payload[0] if payload else None
        self._fields: dict[str, Any] = payload if isinstance(payload, dict) else {}

    def get(self, name: str) -> Any:
        return self._fields.get(name)

    @property
    def score(self) -> Any:
        return self.get("score")

    @property
    def level(self) -> Any:
        return self.get("level")

    @property
    def reasons(self) -> Any:
        return self.get("reasons")

    @property
    def suggestions(self) -> Any:
        return self.get("suggestions")

    def __repr__(self) -> str:
        return f"CandidateObject({self._fields!r})"
