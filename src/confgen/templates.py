"""Template preparation: directory checks, copying, marker checks."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from confgen.errors import ConfigurationError
from confgen.insert import TargetFile
from confgen.tags import Target, markers_for

logger = logging.getLogger(__name__)


def require_dir(path: Path | str, label: str) -> Path:
    """Return ``path`` as a Path, or raise if it is not an existing directory."""
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"{label} directory {p} does not exist")
    if not p.is_dir():
        raise ConfigurationError(f"{label} {p} is not a directory")
    return p


def copy_templates(main_dir: Path | str, output_dir: Path | str, names: list[str]) -> list[Path]:
    """Copy fresh template files from ``main_dir`` into ``output_dir``.

    Always overwrites, so every generation run starts from clean templates.
    """
    src = Path(main_dir)
    dst = Path(output_dir)
    copied = []
    for name in names:
        source = src / name
        if not source.is_file():
            raise ConfigurationError(f"Template {source} not found")
        target = dst / name
        if target.resolve() == source.resolve():
            raise ConfigurationError(
                f"Output directory {dst} is the template directory; "
                "generating there would overwrite the templates"
            )
        shutil.copyfile(source, target)
        logger.debug("Copied %s -> %s", source, target)
        copied.append(target)
    return copied


def missing_markers(path: Path | str, target: Target) -> list[str]:
    """Tag tokens whose marker line is absent from the template at ``path``."""
    template = TargetFile.load(path)
    return [
        d.tag.token for d in markers_for(target)
        if not template.has_marker(d.marker_pattern)
    ]


def check_templates(main_dir: Path | str, manifest_name: str, config_name: str) -> dict[str, list[str]]:
    """Map each template path to its missing tag markers (empty list when complete)."""
    src = Path(main_dir)
    report = {}
    for name, target in ((manifest_name, Target.MANIFEST), (config_name, Target.CONFIG)):
        path = src / name
        if not path.is_file():
            raise ConfigurationError(f"Template {path} not found")
        report[str(path)] = missing_markers(path, target)
    return report
