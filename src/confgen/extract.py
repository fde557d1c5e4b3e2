"""Extract docstring tag payloads from extension source files.

A tagged line looks like:

    -- %keybind , ((modMask x, xK_g), windowPromptGoto)

The payload is everything after the whitespace following the tag token,
kept verbatim (escaped slashes, embedded comments and all).
"""

from __future__ import annotations

import re
from pathlib import Path

from confgen.errors import SourceError
from confgen.tags import TAG_ORDER, Tag, lookup

COMMENT_TOKEN = "--"
ENCODING = "utf-8"

# Token, then at least one whitespace char, then a non-empty payload
_TAG_LINE = re.compile(r"^(%\S+)\s+(.+)$")


def parse_tag_line(line: str, comment_token: str = COMMENT_TOKEN) -> tuple[str, str] | None:
    """Split a source line into (tag token, payload), or None if untagged.

    A tag token with no payload after it is not a match.
    """
    text = line.strip()
    if not text.startswith(comment_token):
        return None
    text = text[len(comment_token):].strip()
    m = _TAG_LINE.match(text)
    if not m:
        return None
    return m.group(1), m.group(2)


def extract_lines(lines: list[str], tag: Tag, comment_token: str = COMMENT_TOKEN) -> list[str]:
    """Payloads for one tag from already-read lines, in line order."""
    payloads = []
    for line in lines:
        parsed = parse_tag_line(line, comment_token)
        # Exact token comparison: %keybind never matches %keybindlist
        if parsed and parsed[0] == tag.token:
            payloads.append(parsed[1])
    return payloads


def read_source_lines(path: Path | str) -> list[str]:
    """Lines of an extension source, split on newlines only.

    Raises:
        SourceError: If the file cannot be read or is not UTF-8.
    """
    try:
        with open(path, encoding=ENCODING, newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(str(path), e) from e
    return [line.rstrip("\r") for line in content.split("\n")]


def extract(path: Path | str, tag: Tag | str, comment_token: str = COMMENT_TOKEN) -> list[str]:
    """Return the payloads for ``tag`` found in the file at ``path``.

    Args:
        path: Extension source file.
        tag: Tag member or token (e.g. "%keybind") to look for.
        comment_token: Host-language line comment opener.

    Returns:
        Payload strings in file order; empty when the tag does not occur.
    """
    lines = read_source_lines(path)
    return extract_lines(lines, lookup(tag).tag, comment_token)


def extract_all(path: Path | str, comment_token: str = COMMENT_TOKEN) -> dict[Tag, list[str]]:
    """Payloads for every catalog tag, in catalog order. Tags with no hits are omitted."""
    lines = read_source_lines(path)
    found = {}
    for tag in TAG_ORDER:
        payloads = extract_lines(lines, tag, comment_token)
        if payloads:
            found[tag] = payloads
    return found
