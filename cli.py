#!/usr/bin/env python3
"""
CLI interface for the local template library.

Usage:
    postmark-templates categories
    postmark-templates templates <category>
    postmark-templates content <category> <template> [--format text]
    postmark-templates ideas <topic>

Same queries as the library tools, but printing the raw result envelope as
JSON. Useful for checking a template tree before pointing the server at it.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from config import resolve_templates_base_path
from logging_config import configure_logging
from template_library import (
    CONTENT_FILES,
    get_template_content,
    get_template_ideas,
    list_categories,
    list_templates_in_category,
)


def cmd_categories(args: argparse.Namespace) -> int:
    """List categories."""
    return _emit(asyncio.run(list_categories(args.base_path)))


def cmd_templates(args: argparse.Namespace) -> int:
    """List templates in a category."""
    return _emit(asyncio.run(list_templates_in_category(args.base_path, args.category)))


def cmd_content(args: argparse.Namespace) -> int:
    """Print template content."""
    return _emit(asyncio.run(
        get_template_content(args.base_path, args.category, args.template, args.format)
    ))


def cmd_ideas(args: argparse.Namespace) -> int:
    """Search template names."""
    return _emit(asyncio.run(get_template_ideas(args.base_path, args.topic)))


def _emit(result: object) -> int:
    envelope = result.to_dict()  # type: ignore[attr-defined]
    print(json.dumps(envelope, indent=2, ensure_ascii=False))
    return 0 if envelope["ok"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Local Postmark template library CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    postmark-templates categories
    postmark-templates templates basic
    postmark-templates content basic welcome --format text
    postmark-templates ideas receipt
    postmark-templates --base-path ./my-templates categories
""",
    )
    parser.add_argument(
        "--base-path",
        type=Path,
        default=None,
        help="Template library root (default: POSTMARK_TEMPLATES_PATH, "
             "TEMPLATES_BASE_PATH, or ./postmark-templates/templates-inlined)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # categories
    categories_p = subparsers.add_parser("categories", help="List template categories")
    categories_p.set_defaults(func=cmd_categories)

    # templates
    templates_p = subparsers.add_parser("templates", help="List templates in a category")
    templates_p.add_argument("category", help="Category name")
    templates_p.set_defaults(func=cmd_templates)

    # content
    content_p = subparsers.add_parser("content", help="Print template content")
    content_p.add_argument("category", help="Category name")
    content_p.add_argument("template", help="Template name")
    content_p.add_argument(
        "--format",
        choices=sorted(CONTENT_FILES),
        default="html",
        help="Content variant (default: html)",
    )
    content_p.set_defaults(func=cmd_content)

    # ideas
    ideas_p = subparsers.add_parser("ideas", help="Find templates whose name contains a topic")
    ideas_p.add_argument("topic", help="Search term (case-insensitive)")
    ideas_p.set_defaults(func=cmd_ideas)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.base_path is None:
        args.base_path = resolve_templates_base_path()
    configure_logging("WARNING")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
