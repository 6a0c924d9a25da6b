from dataclasses import dataclass
from enum import Enum

from clauseradar.logging.logger import Log


class NoticeLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A short user-facing message about a workflow outcome."""

    title: str
    description: str
    level: NoticeLevel = NoticeLevel.INFO


class NoticeBoard:
    """Collects notices for the presentation layer and mirrors them to the log."""

    def __init__(self) -> None:
        self._notices: list[Notice] = []

    def post(self, notice: Notice) -> None:
        self._notices.append(notice)
        if notice.level is NoticeLevel.ERROR:
            Log.warning(f"{notice.title}: {notice.description}", component="notice")
        else:
            Log.info(f"{notice.title}: {notice.description}", component="notice")

    @property
    def notices(self) -> tuple[Notice, ...]:
        return tuple(self._notices)

    def drain(self) -> list[Notice]:
        """Return and forget every notice posted so far."""
        drained, self._notices = self._notices, []
        return drained
