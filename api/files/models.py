"""
Models for sample file records
"""

from enum import Enum
from typing import Any
from sqlmodel import SQLModel
from pydantic import ConfigDict, field_validator


class FileType(str, Enum):
    """File types the reconciler knows how to locate"""

    CRAM = "cram"
    CRAI = "crai"
    VCF = "vcf"
    TBI = "tbi"


class FileRecord(SQLModel):
    """File record as returned by GET .../samples/{sampleId}/files"""

    id: int
    type: str
    name: str | None = None
    nickname: str | None = None
    uri: str | None = None
    size: str | None = None  # String-encoded byte count

    model_config = ConfigDict(extra="ignore")

    @field_validator("size", mode="before")
    @classmethod
    def size_as_string(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def file_type(self) -> FileType | None:
        try:
            return FileType(self.type)
        except ValueError:
            return None


class FileRecordsPublic(SQLModel):
    """
    Envelope of the sample files listing.

    Records stay raw so each one is validated on its own.
    """

    data: list[Any] = []

    model_config = ConfigDict(extra="ignore")


class FileRecordUpdate(SQLModel):
    """Body of PUT .../files/{fileId}"""

    uri: str
    size: str | None = None
    name: str | None = None
    nickname: str | None = None

    model_config = ConfigDict(extra="forbid")


class ExpectedLocation(SQLModel):
    """Canonical on-disk location for a file record"""

    uri: str
    filename: str
    size: int | None = None


class FieldMismatch(SQLModel):
    actual: str | int | None = None
    expected: str | int | None = None


class FileComparison(SQLModel):
    """
    Mismatches between a file record and the filesystem.

    A field is None when it matched.
    """

    uri: FieldMismatch | None = None
    size: FieldMismatch | None = None
    name: FieldMismatch | None = None
    nickname: FieldMismatch | None = None

    @property
    def broken(self) -> bool:
        return any(
            mismatch is not None
            for mismatch in (self.uri, self.size, self.name, self.nickname)
        )

    def describe(self) -> str:
        parts = []
        for field in ("uri", "size", "name", "nickname"):
            mismatch = getattr(self, field)
            if mismatch is not None:
                parts.append(f"{field}: {mismatch.actual!r} != {mismatch.expected!r}")
        return ", ".join(parts)
