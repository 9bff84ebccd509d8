from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, StrictBool, field_validator

from retdec.file import File


OutputFormat = Literal["plain", "json"]


class JobStatus(BaseModel):
    finished: StrictBool
    succeeded: StrictBool
    failed: StrictBool
    error: str | None = None

    @field_validator("error", mode="before")
    @classmethod
    def _keep_only_text_errors(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


@dataclass
class AnalysisArguments:
    input_file: File | None = None
    output_format: OutputFormat | None = None
    verbose: bool | None = None


@dataclass
class DecompilationArguments:
    input_file: File | None = None
