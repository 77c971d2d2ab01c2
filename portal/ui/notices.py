from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A transient message shown to the user (toast)."""

    level: NoticeLevel
    text: str


@dataclass
class NoticeBoard:
    """
    Collects notices raised by the UI state machines.
    A view drains it after each action and displays what it got.
    """

    notices: List[Notice] = field(default_factory=list)

    def success(self, text: str) -> None:
        self.notices.append(Notice(NoticeLevel.SUCCESS, text))

    def error(self, text: str) -> None:
        self.notices.append(Notice(NoticeLevel.ERROR, text))

    @property
    def last(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None

    def errors(self) -> List[str]:
        return [notice.text for notice in self.notices if notice.level is NoticeLevel.ERROR]

    def drain(self) -> List[Notice]:
        drained, self.notices = self.notices, []
        return drained
