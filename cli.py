"""CLI entry point for exporting field groups and editing options page values."""

from __future__ import annotations

import argparse
import importlib
import importlib.util
import json
import logging
import sys
from pathlib import Path
from types import ModuleType

from dotenv import load_dotenv

from acf.errors import ACFError
from acf.options_page import OptionsPage
from acf.registry import Registry, default_registry
from wordpress.auth import load_site_config
from wordpress.client import WordPressAPIError, WordPressClient
from wordpress.meta import OptionStore

logger = logging.getLogger("cli")


def load_declarations(target: str) -> ModuleType:
    """Import a declarations module by dotted name or by .py file path.

    Importing the module is what registers its field groups and options
    pages, so nothing is called on it afterwards.
    """
    path = Path(target)
    if path.suffix == ".py":
        if not path.exists():
            raise FileNotFoundError(f"Declarations file not found: {path}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    return importlib.import_module(target)


def pretty_print_registry(registry: Registry) -> None:
    """Print a human-readable summary of the registered groups and pages."""
    print(f"Options Pages: {len(registry.options_pages)}")
    for slug, config in sorted(registry.options_pages.items()):
        print(f"  {slug}  ({config.get('page_title', '')})")

    print(f"Field Groups: {len(registry.field_groups)}")
    print("=" * 70)

    for config in registry.export():
        print(f"\n  {config['key']}  (menu_order {config.get('menu_order', 0)})")
        for rule_group in config.get("location", []):
            rules = " and ".join(
                f"{r['param']} {r['operator']} {r['value']}" for r in rule_group
            )
            print(f"    location: {rules}")
        print("  " + "-" * 50)
        _print_fields(config.get("fields", []), indent=4)


def _print_fields(fields: list[dict], indent: int = 0) -> None:
    """Recursively print fields, including repeater rows and layouts."""
    prefix = " " * indent
    for field in fields:
        print(f"{prefix}{field['name']}  [{field['type']}]  ->  {field['key']}")
        if field.get("sub_fields"):
            _print_fields(field["sub_fields"], indent + 4)
        for layout in (field.get("layouts") or {}).values():
            print(f"{prefix}    <{layout['name']}>")
            _print_fields(layout.get("sub_fields", []), indent + 8)


def _export(args: argparse.Namespace) -> int:
    load_declarations(args.declarations)
    registry = default_registry

    if args.local_json:
        written = registry.write_local_json(args.local_json)
        print(f"Wrote {len(written)} field groups to {args.local_json}")

    if args.pretty:
        pretty_print_registry(registry)
    elif args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with args.output.open("w", encoding="utf-8") as f:
            json.dump(registry.export(), f, indent=2)
        print(f"Export written to {args.output}")
    elif not args.local_json:
        json.dump(registry.export(), sys.stdout, indent=2)

    return 0


def _option(args: argparse.Namespace) -> int:
    config = load_site_config(args.site, config_path=args.sites_file)
    page = OptionsPage(args.page_title, store=OptionStore(WordPressClient(config)))

    if args.action == "get":
        print(json.dumps(page.get_meta_value(args.key)))
        return 0

    if args.value is None:
        print("option set needs a VALUE", file=sys.stderr)
        return 2

    if not page.set_meta_value(args.key, args.value):
        print(f"{page.option_name(args.key)} was not saved", file=sys.stderr)
        return 1

    print(f"{page.option_name(args.key)} = {args.value}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export ACF field groups and manage options page values"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    export = commands.add_parser(
        "export",
        help="Export the field groups registered by a declarations module",
    )
    export.add_argument(
        "declarations",
        help="Dotted module name or path to a .py file that registers field groups",
    )
    export.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output path for the ACF export JSON (default: print to stdout)",
    )
    export.add_argument(
        "--local-json",
        type=Path,
        default=None,
        help="Also write one JSON file per group into this acf-json directory",
    )
    export.add_argument(
        "--pretty",
        action="store_true",
        help="Print human-readable summary instead of raw JSON",
    )
    export.set_defaults(handler=_export)

    option = commands.add_parser("option", help="Read or write an options page value")
    option.add_argument("action", choices=["get", "set"])
    option.add_argument("site", help="Site name from wordpress_sites.yaml")
    option.add_argument("page_title", help="Options page title, e.g. 'Site Settings'")
    option.add_argument("key", help="Field name on the options page")
    option.add_argument("value", nargs="?", default=None, help="Value to store (set only)")
    option.add_argument(
        "--sites-file",
        type=Path,
        default=None,
        help="Path to wordpress_sites.yaml (default: config/wordpress_sites.yaml)",
    )
    option.set_defaults(handler=_option)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    try:
        return args.handler(args)
    except (ACFError, WordPressAPIError, FileNotFoundError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
