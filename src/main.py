# src/main.py - v2
"""CLI entry point - list, document commands.

Usage:
    docsync list <target>
    docsync document <target> <path> [--language xx] [--verify] [--apply-fix]

<target> is a GitHub repository URL or a local directory.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from docsync.core.errors import DocSyncError
from docsync.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from docsync.config.settings import ConfigurationError, load_settings
    from docsync.logging.logger import setup_logging

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except DocSyncError as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="docsync",
        description=f"DocSync v{__version__} - living documentation for source files",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- list ---
    p_list = subparsers.add_parser(
        "list", help="List documentable files of a repository",
    )
    p_list.add_argument("target", help="GitHub URL or local directory")
    p_list.set_defaults(func=_cmd_list)

    # --- document ---
    p_doc = subparsers.add_parser(
        "document", help="Generate (and optionally verify/translate) documentation for a file",
    )
    p_doc.add_argument("target", help="GitHub URL or local directory")
    p_doc.add_argument("path", help="File path inside the repository")
    p_doc.add_argument(
        "--language", default=None,
        help="Show the documentation in this language (default: canonical)",
    )
    p_doc.add_argument(
        "--verify", action="store_true",
        help="Verify the code example against the source",
    )
    p_doc.add_argument(
        "--apply-fix", action="store_true",
        help="Apply the verifier's suggested fix when verification fails",
    )
    p_doc.set_defaults(func=_cmd_document)

    return parser


async def _cmd_list(args: argparse.Namespace, settings: Any) -> int:
    """Print documentable file paths, one per line."""
    from docsync.api.facade import create_orchestrator, open_source

    source = open_source(args.target, settings)
    try:
        orchestrator = create_orchestrator(source, settings)
        for node in await orchestrator.list_documentable():
            print(node.path)
    finally:
        await _close(source)
    return 0


async def _cmd_document(args: argparse.Namespace, settings: Any) -> int:
    """Document one file and print the resulting document as JSON."""
    from docsync.api.facade import create_orchestrator, open_source

    if args.language and args.language.lower() not in settings.supported_languages_list:
        logger.error(
            "Unsupported language %s (supported: %s)",
            args.language, ", ".join(settings.supported_languages_list),
        )
        return 1

    source = open_source(args.target, settings)
    try:
        orchestrator = create_orchestrator(source, settings)
        result = await orchestrator.ensure_documented(args.path)
        output: dict[str, Any] = {"tier": result.tier.value, "from_cache": result.from_cache}

        if args.verify or args.apply_fix:
            record = await orchestrator.request_verification(args.path)
            if args.apply_fix and record.fixed_code:
                orchestrator.apply_fix(args.path, record.fixed_code)
                output["fix_applied"] = True

        language = args.language or orchestrator.canonical_language
        document = await orchestrator.request_translation(args.path, language)
        output["document"] = document.model_dump(mode="json")
    finally:
        await _close(source)

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


async def _close(source: object) -> None:
    aclose = getattr(source, "aclose", None)
    if aclose is not None:
        await aclose()


if __name__ == "__main__":
    sys.exit(main())
