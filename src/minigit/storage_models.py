"""On-disk record shapes for commit directories."""

from typing import List

from pydantic import BaseModel, Field


class SnapshotRecord(BaseModel):
    """Per-file record in COMMIT_<version>/ (named after the file)."""

    name: str
    path: str
    contents: str


class CommitFileEntry(BaseModel):
    """Reference from a commit's meta record to one snapshot record."""

    name: str
    path: str
    record: str


class CommitMeta(BaseModel):
    """The ``meta`` record describing a commit."""

    version: int = Field(ge=1)
    message: str
    created: str = ""
    files: List[CommitFileEntry] = Field(default_factory=list)
