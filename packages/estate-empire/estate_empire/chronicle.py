"""Chronicle - bounded, transient log of player-facing notices."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Notice:
    day: int
    kind: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)


class Chronicle:
    def __init__(self, max_entries: int = 0) -> None:
        maxlen = max_entries if max_entries > 0 else None
        self._notices: deque[Notice] = deque(maxlen=maxlen)

    def emit(self, day: int, kind: str, message: str, **data: Any) -> Notice:
        notice = Notice(day=day, kind=kind, message=message, data=data)
        self._notices.append(notice)
        return notice

    def query(self, kind: str | None = None, after: int | None = None) -> list[Notice]:
        result = list(self._notices)
        if kind is not None:
            result = [n for n in result if n.kind == kind]
        if after is not None:
            result = [n for n in result if n.day > after]
        return result

    def last(self, kind: str | None = None) -> Notice | None:
        for n in reversed(self._notices):
            if kind is None or n.kind == kind:
                return n
        return None

    def clear(self) -> None:
        self._notices.clear()

    def __len__(self) -> int:
        return len(self._notices)
