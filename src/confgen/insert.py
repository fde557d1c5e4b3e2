"""In-memory editing of generated target files.

A TargetFile holds the lines of a template copied into the output
directory. Insertions only ever add text directly after (or onto the end
of) a marker line; nothing else in the file moves relative to the rest.
The file is written back once, after all insertions succeeded.

Lines are split on "\\n" only and keep any "\\r" of a CRLF ending, so
untouched lines are written back byte-for-byte.
"""

from __future__ import annotations

import re
from pathlib import Path

from confgen.errors import MarkerNotFound, SourceError

ENCODING = "utf-8"


class TargetFile:
    """Line buffer for one generated artifact."""

    def __init__(self, path: Path | str, lines: list[str], trailing_newline: bool = True):
        self.path = Path(path)
        self.lines = lines
        self.trailing_newline = trailing_newline
        self.changes = 0

    @classmethod
    def load(cls, path: Path | str, save_path: Path | str | None = None) -> TargetFile:
        """Read ``path``; ``save_path`` redirects where save() writes.

        Raises:
            SourceError: If the file cannot be read or is not UTF-8.
        """
        try:
            with open(path, encoding=ENCODING, newline="") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(str(path), e) from e
        lines = content.split("\n")
        trailing = content.endswith("\n")
        if trailing:
            lines.pop()
        return cls(save_path or path, lines, trailing)

    def text(self) -> str:
        body = "\n".join(self.lines)
        if self.trailing_newline and self.lines:
            body += "\n"
        return body

    def save(self) -> None:
        try:
            with open(self.path, "w", encoding=ENCODING, newline="") as f:
                f.write(self.text())
        except OSError as e:
            raise SourceError(str(self.path), e) from e

    def find_marker(self, pattern: re.Pattern) -> int | None:
        """Index of the first line matching ``pattern``, or None."""
        for i, line in enumerate(self.lines):
            if pattern.search(line):
                return i
        return None

    def has_marker(self, pattern: re.Pattern) -> bool:
        return self.find_marker(pattern) is not None

    def _require(self, pattern: re.Pattern, tag: str, marker: str | None) -> int:
        idx = self.find_marker(pattern)
        if idx is None:
            raise MarkerNotFound(tag, marker or pattern.pattern, str(self.path))
        return idx

    def insert_after_marker(
        self, pattern: re.Pattern, line: str, tag: str = "", marker: str | None = None,
    ) -> int:
        """Insert ``line`` directly below the first line matching ``pattern``.

        Repeated calls for the same marker stack upward: each new line
        lands between the marker and the previously inserted line. The
        new line takes the marker line's CRLF ending, if it has one.

        Returns:
            Index of the inserted line.

        Raises:
            MarkerNotFound: If no line matches, naming ``marker`` (plain
                text) when given. The buffer is unchanged.
        """
        idx = self._require(pattern, tag, marker)
        if self.lines[idx].endswith("\r"):
            line += "\r"
        self.lines.insert(idx + 1, line)
        self.changes += 1
        return idx + 1

    def append_to_marker(
        self, pattern: re.Pattern, text: str, tag: str = "", marker: str | None = None,
    ) -> int:
        """Append ``text`` to the end of the first line matching ``pattern``.

        Used for single-line list fields (e.g. ``build-depends:``). A CRLF
        ending stays at the end of the line.
        """
        idx = self._require(pattern, tag, marker)
        current = self.lines[idx]
        if current.endswith("\r"):
            self.lines[idx] = current[:-1] + text + "\r"
        else:
            self.lines[idx] = current + text
        self.changes += 1
        return idx
