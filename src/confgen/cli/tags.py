"""Tag catalog and extraction CLI commands."""

import argparse


def cmd_tags(args: argparse.Namespace) -> int:
    from confgen.tags import TAG_CATALOG

    print(f"\n  {'Tag':<14} {'Target':<9} {'Indent':<7} {'Passive':<12} {'Active':<10} Marker")
    print(f"  {'─' * 90}")
    for definition in TAG_CATALOG.values():
        print(
            f"  {definition.tag.token:<14} {definition.target.value:<9} "
            f"{len(definition.indent):<7} {definition.passive_prefix!r:<12} "
            f"{definition.active_prefix!r:<10} {definition.marker}"
        )
    print()
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    from pathlib import Path

    from confgen.errors import ConfgenError
    from confgen.extract import extract, extract_all
    from confgen.tags import lookup

    path = Path(args.file)
    if not path.is_file():
        print(f"ERROR: {path} is not a file")
        return 1

    try:
        if args.tag:
            found = {lookup(args.tag).tag: extract(path, args.tag)}
        else:
            found = extract_all(path)
    except (ValueError, ConfgenError) as e:
        print(f"ERROR: {e}")
        return 1

    if not any(found.values()):
        print(f"No tagged lines in {path}")
        return 0

    for tag, payloads in found.items():
        print(f"{tag.token} ({len(payloads)})")
        for payload in payloads:
            print(f"  {payload}")
    return 0
