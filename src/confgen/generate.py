"""Splice extension docstrings into the generated manifest and config.

The generation run:
1. List extension files in the contrib directory (minus the aggregate
   entry point) in reverse lexical order
2. For each file, extract every catalog tag in catalog order
3. Insert each tag's payloads below its marker, last payload first,
   then a group comment naming the extension
4. Write both target files back once everything succeeded

Because every insertion lands directly below the marker, the reversed
file order and reversed payload order cancel out: beneath each marker
the extensions read in forward lexical order, each introduced by its
group comment and followed by its payloads in source order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from confgen.errors import ConfigurationError, MarkerNotFound
from confgen.extract import COMMENT_TOKEN, extract_lines, read_source_lines
from confgen.insert import TargetFile
from confgen.tags import TAG_CATALOG, TAG_ORDER, Target, TagDefinition

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".hs"
MANIFEST_NAME = "xmonad.cabal"
CONFIG_NAME = "Config.hs"


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    extensions: list[str] = field(default_factory=list)
    payloads: int = 0
    group_comments: int = 0
    targets: list[str] = field(default_factory=list)
    details: list[str] = field(default_factory=list)
    dry_run: bool = False


def list_extension_files(
    contrib_dir: Path | str,
    suffix: str = DEFAULT_SUFFIX,
    exclude: set[str] | frozenset[str] = frozenset(),
) -> list[Path]:
    """Extension sources in processing order.

    Files named in ``exclude`` (the generated targets, when they live in
    the contrib dir) are never sources. Of the rest, the file last in
    forward lexical order is the aggregate entry point and is skipped;
    the others come back in reverse lexical order.
    """
    candidates = sorted(
        p for p in Path(contrib_dir).iterdir()
        if p.is_file() and p.name.endswith(suffix) and p.name not in exclude
    )
    return list(reversed(candidates[:-1]))


def extension_name(path: Path, suffix: str = DEFAULT_SUFFIX) -> str:
    name = path.name
    return name[: -len(suffix)] if suffix and name.endswith(suffix) else path.stem


def apply_tag(
    target: TargetFile,
    definition: TagDefinition,
    payloads: list[str],
    extension: str,
    active: bool,
) -> tuple[int, int]:
    """Insert one extension's payloads for one tag into ``target``.

    Returns:
        (payloads inserted, group comments inserted).

    Raises:
        MarkerNotFound: Before touching the buffer, if the marker is absent.
    """
    if not payloads:
        return 0, 0

    pattern = definition.marker_pattern
    if not target.has_marker(pattern):
        raise MarkerNotFound(
            definition.tag.token, definition.marker, str(target.path), extension,
        )

    if definition.field_append:
        # Appends already read left to right in call order
        for payload in payloads:
            target.append_to_marker(
                pattern, definition.format_line(payload, active),
                definition.tag.token, marker=definition.marker,
            )
    else:
        for payload in reversed(payloads):
            target.insert_after_marker(
                pattern, definition.format_line(payload, active),
                definition.tag.token, marker=definition.marker,
            )

    comments = 0
    if definition.group_comment:
        target.insert_after_marker(
            pattern, definition.format_group_comment(extension),
            definition.tag.token, marker=definition.marker,
        )
        comments = 1
    return len(payloads), comments


def generate(
    extension_files: list[Path],
    targets: dict[Target, TargetFile],
    active: bool = False,
    suffix: str = DEFAULT_SUFFIX,
    comment_token: str = COMMENT_TOKEN,
) -> GenerationResult:
    """Run extraction and insertion over in-memory targets. Nothing is written."""
    result = GenerationResult()

    for path in extension_files:
        name = extension_name(path, suffix)
        lines = read_source_lines(path)
        result.extensions.append(name)
        logger.debug("Processing extension %s", path)

        for tag in TAG_ORDER:
            payloads = extract_lines(lines, tag, comment_token)
            if not payloads:
                continue
            definition = TAG_CATALOG[tag]
            added, comments = apply_tag(
                targets[definition.target], definition, payloads, name, active,
            )
            result.payloads += added
            result.group_comments += comments
            result.details.append(f"{name}: {added} x {tag.token}")
            logger.debug("%s: inserted %d %s payload(s)", name, added, tag.token)

    return result


def run(
    contrib_dir: Path | str,
    active: bool = False,
    output_dir: Path | str | None = None,
    manifest_name: str = MANIFEST_NAME,
    config_name: str = CONFIG_NAME,
    suffix: str = DEFAULT_SUFFIX,
    dry_run: bool = False,
    template_dir: Path | str | None = None,
) -> GenerationResult:
    """Generate the manifest and config in ``output_dir`` from ``contrib_dir``.

    The target files must already hold fresh template copies. They are
    rewritten in place only if every insertion succeeded; a failed run
    leaves them as they were.

    Args:
        contrib_dir: Directory of extension sources.
        active: Insert contributions uncommented.
        output_dir: Where the target files live. Defaults to contrib_dir.
        manifest_name: File name of the build manifest.
        config_name: File name of the config source.
        suffix: Extension source file suffix.
        dry_run: Compute the result without writing.
        template_dir: Read the target files from here instead of output_dir.

    Raises:
        ConfigurationError: If a target file is missing.
        MarkerNotFound: If a template lacks a marker some extension needs.
        SourceError: If a target or extension file cannot be read or written.
    """
    contrib = Path(contrib_dir)
    out = Path(output_dir) if output_dir else contrib
    source = Path(template_dir) if template_dir else out

    targets = {}
    for target, name in ((Target.MANIFEST, manifest_name), (Target.CONFIG, config_name)):
        if not (source / name).is_file():
            raise ConfigurationError(
                f"Target file {source / name} not found; copy the templates first"
            )
        targets[target] = TargetFile.load(source / name, save_path=out / name)

    files = list_extension_files(contrib, suffix, exclude={manifest_name, config_name})
    logger.debug("Found %d extension file(s) in %s", len(files), contrib)

    result = generate(files, targets, active=active, suffix=suffix)
    result.dry_run = dry_run

    for target in targets.values():
        result.targets.append(str(target.path))
        if not dry_run:
            target.save()
            logger.debug("Wrote %s (%d change(s))", target.path, target.changes)

    return result
