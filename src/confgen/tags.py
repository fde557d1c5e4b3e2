"""Tag catalog — single source of truth for docstring tags.

Every tag recognized in extension sources maps to one TagDefinition.
Adding a tag means adding a Tag member and a catalog entry; the
generator never branches on individual tags.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class Tag(Enum):
    """Docstring tags, in the order the generator processes them."""

    DEPENDENCY = "%cabalbuild"
    DEFINITION = "%def"
    IMPORT = "%import"
    KEYBIND = "%keybind"
    KEYBINDLIST = "%keybindlist"
    LAYOUT = "%layout"
    MOUSEBIND = "%mousebind"

    @property
    def token(self) -> str:
        return self.value


class Target(Enum):
    """Which generated artifact a tag writes into."""

    MANIFEST = "manifest"
    CONFIG = "config"


@dataclass(frozen=True)
class TagDefinition:
    """Insertion policy for one tag."""

    tag: Tag
    target: Target
    marker: str
    indent: str = ""
    passive_prefix: str = "-- "
    active_prefix: str = ""
    always_active: bool = False
    # Append to the end of the marker line instead of adding a line below it
    field_append: bool = False
    group_comment: bool = True

    @property
    def marker_pattern(self) -> re.Pattern:
        """Compiled pattern for the anchor line.

        The marker text is escaped so slashes and backslashes are never
        read as pattern syntax.
        """
        if self.field_append:
            return re.compile(r"^\s*" + re.escape(self.marker))
        return re.compile(r"^\s*" + re.escape(self.marker) + r"\s*$")

    def prefix(self, active: bool) -> str:
        if active or self.always_active:
            return self.active_prefix
        return self.passive_prefix

    def format_line(self, payload: str, active: bool) -> str:
        """Render a payload as it should appear in the target file."""
        if self.field_append:
            return self.prefix(active) + payload
        return self.indent + self.prefix(active) + payload

    def format_group_comment(self, extension: str) -> str:
        return f"{self.indent}--   For extension {extension}:"


_BLOCK_INDENT = "    "

_DEFINITIONS = (
    TagDefinition(
        Tag.DEPENDENCY, Target.MANIFEST, "build-depends:",
        passive_prefix=", ", active_prefix=", ",
        always_active=True, field_append=True, group_comment=False,
    ),
    TagDefinition(Tag.DEFINITION, Target.CONFIG, "-- % Extension-provided definitions"),
    TagDefinition(
        Tag.IMPORT, Target.CONFIG, "-- % Extension-provided imports",
        passive_prefix="-- import ", active_prefix="import ",
    ),
    TagDefinition(
        Tag.KEYBIND, Target.CONFIG, "-- % Extension-provided key bindings",
        indent=_BLOCK_INDENT,
    ),
    TagDefinition(
        Tag.KEYBINDLIST, Target.CONFIG, "-- % Extension-provided key bindings lists",
        indent=_BLOCK_INDENT,
    ),
    TagDefinition(
        Tag.LAYOUT, Target.CONFIG, "-- % Extension-provided layouts",
        indent=_BLOCK_INDENT,
    ),
    TagDefinition(
        Tag.MOUSEBIND, Target.CONFIG, "-- % Extension-provided mouse bindings",
        indent=_BLOCK_INDENT,
    ),
)

TAG_CATALOG: MappingProxyType = MappingProxyType({d.tag: d for d in _DEFINITIONS})

# Iteration order for each extension file
TAG_ORDER: tuple[Tag, ...] = tuple(TAG_CATALOG)

_BY_TOKEN = {t.token: t for t in Tag}


def lookup(tag: Tag | str) -> TagDefinition:
    """Return the definition for a tag member or its token (e.g. "%keybind").

    Raises:
        ValueError: If the token names no known tag.
    """
    if isinstance(tag, str):
        member = _BY_TOKEN.get(tag)
        if member is None:
            raise ValueError(
                f"Unknown tag '{tag}'. Known tags: {', '.join(_BY_TOKEN)}"
            )
        tag = member
    return TAG_CATALOG[tag]


def markers_for(target: Target) -> list[TagDefinition]:
    """Definitions whose marker must be present in the given target."""
    return [d for d in TAG_CATALOG.values() if d.target is target]
