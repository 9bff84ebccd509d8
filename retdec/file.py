from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from unidecode import unidecode

from retdec.errors import DecodeError, LocalFileError


@dataclass(frozen=True)
class File:
    """In-memory file: raw content plus the name it is uploaded/saved under."""

    content: bytes
    name: str

    @staticmethod
    def from_path(path: str | Path, name: str | None = None) -> "File":
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise LocalFileError(f"failed to read {path}") from exc
        return File(content=content, name=name if name is not None else path.name)

    def content_as_text(self) -> str:
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("failed to parse file content as UTF-8") from exc

    def content_len(self) -> int:
        return len(self.content)

    def safe_name(self) -> str:
        # The service rejects uploads whose names are not plain ASCII.
        transliterated = unidecode(self.name)
        return "".join(c if 32 <= ord(c) <= 127 else "_" for c in transliterated)

    def save_into(self, directory: str | Path, name: str | None = None) -> Path:
        dst = Path(directory) / Path(name or self.name).name
        try:
            dst.write_bytes(self.content)
        except OSError as exc:
            raise LocalFileError(f"failed to write content into {dst}") from exc
        return dst
