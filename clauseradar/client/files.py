import mimetypes
from dataclasses import dataclass
from pathlib import Path

from clauseradar.client.exceptions import AnalysisValidationError

ACCEPTED_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


@dataclass(frozen=True)
class SelectedFile:
    """A document picked by the user, held in memory until upload."""

    name: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()

    @property
    def upload_content_type(self) -> str:
        return self.content_type or ACCEPTED_TYPES.get(
            self.extension, "application/octet-stream"
        )

    @classmethod
    def from_path(cls, path: Path) -> "SelectedFile":
        """Read a local file, guessing its MIME type from the extension."""
        content_type, _encoding = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=content_type or ACCEPTED_TYPES.get(path.suffix.lower()),
        )


def check_upload_file(
    file: SelectedFile,
    max_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> None:
    """Reject files the service would refuse, without touching the network.

    Raises:
        AnalysisValidationError: on unsupported type, empty or oversized file.
    """
    if file.extension not in ACCEPTED_TYPES:
        raise AnalysisValidationError(
            f"Unsupported file type '{file.name}'. Supported formats: PDF, DOC, DOCX"
        )
    if file.content_type is not None and file.content_type not in ACCEPTED_TYPES.values():
        raise AnalysisValidationError(
            f"Unsupported content type '{file.content_type}' for '{file.name}'"
        )
    if file.size == 0:
        raise AnalysisValidationError(f"File '{file.name}' is empty")
    if file.size > max_size_bytes:
        raise AnalysisValidationError(
            f"File '{file.name}' is {format_file_size(file.size)}, "
            f"larger than the {format_file_size(max_size_bytes)} limit"
        )


def format_file_size(size_bytes: int) -> str:
    """Human readable size, e.g. ``2 MB`` or ``1.5 KB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    value = float(size_bytes)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[index]}"
