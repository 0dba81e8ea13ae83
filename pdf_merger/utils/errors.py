"""Exceptions raised while merging documents."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class MergeError(Exception):
    """Base class for every failure that aborts a merge."""


class ConfigurationError(MergeError, ValueError):
    """The merge was requested with an unusable set of inputs."""


class DocumentLoadError(MergeError):
    """An input path did not resolve to a readable PDF document."""

    def __init__(self, path: Path, reason: Optional[str] = None) -> None:
        self.path = path
        message = f"{path} could not be loaded"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StructuralError(MergeError):
    """The input set lacks a Catalog or Pages root."""


class SaveError(MergeError):
    """The merged document could not be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to write {path}: {reason}")
