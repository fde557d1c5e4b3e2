"""Exceptions raised by the config generator."""

from __future__ import annotations


class ConfgenError(Exception):
    """Base class for failures that abort a generation run."""


class ConfigurationError(ConfgenError):
    """An input directory or settings file is missing or invalid."""


class MarkerNotFound(ConfgenError):
    """A target file lacks the anchor line a tag inserts after."""

    def __init__(self, tag: str, marker: str, target: str, extension: str | None = None):
        self.tag = tag
        self.marker = marker
        self.target = target
        self.extension = extension
        msg = f"Marker for {tag} ('{marker}') not found in {target}"
        if extension:
            msg += f" while processing {extension}"
        super().__init__(msg)


class SourceError(ConfgenError):
    """A template or extension file could not be read, decoded or written."""

    def __init__(self, path: str, reason: Exception):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot process {path}: {reason}")
