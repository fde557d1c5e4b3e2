"""Generate and check CLI commands."""

import argparse

from confgen.errors import ConfgenError


def cmd_generate(args: argparse.Namespace) -> int:
    from confgen.generate import run
    from confgen.settings import resolve_settings
    from confgen.templates import copy_templates, require_dir

    try:
        settings = resolve_settings(
            config_path=args.config,
            main_dir=args.main_dir,
            contrib_dir=args.contrib_dir,
            output_dir=args.output_dir,
            mode=args.mode,
        )
        require_dir(settings.contrib_dir, "Contrib")
        require_dir(settings.output_dir, "Output")
        template_dir = None
        if not args.no_copy:
            require_dir(settings.main_dir, "Main")
            if args.dry_run:
                # Read the pristine templates in place; nothing is copied
                template_dir = settings.main_dir
            else:
                copy_templates(
                    settings.main_dir, settings.output_dir,
                    [settings.manifest, settings.config_source],
                )
        result = run(
            settings.contrib_dir,
            active=settings.active,
            output_dir=settings.output_dir,
            manifest_name=settings.manifest,
            config_name=settings.config_source,
            suffix=settings.suffix,
            dry_run=args.dry_run,
            template_dir=template_dir,
        )
    except ConfgenError as e:
        print(f"ERROR: {e}")
        return 1

    mode = "active" if settings.active else "passive"
    print(f"Config Generation Results ({mode})")
    print("─" * 40)
    print(f"  Extensions:     {len(result.extensions)}")
    print(f"  Payloads:       {result.payloads}")
    print(f"  Group comments: {result.group_comments}")
    for detail in result.details:
        print(f"    - {detail}")
    for target in result.targets:
        print(f"  Target: {target}")

    if result.dry_run:
        print("\n[DRY RUN] No files were modified.")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    from confgen.settings import resolve_settings
    from confgen.templates import check_templates, require_dir

    try:
        settings = resolve_settings(config_path=args.config, main_dir=args.main_dir)
        require_dir(settings.main_dir, "Main")
        report = check_templates(
            settings.main_dir, settings.manifest, settings.config_source,
        )
    except ConfgenError as e:
        print(f"ERROR: {e}")
        return 1

    failed = 0
    for path, missing in report.items():
        if missing:
            print(f"  FAIL {path}: missing markers for {', '.join(missing)}")
            failed += 1
        else:
            print(f"  PASS {path}")
    return 1 if failed else 0
