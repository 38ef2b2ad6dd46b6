"""CLI entrypoints for entitylint commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, Iterator, List, Sequence

from .config import EntityLintConfig
from .hook import parse_envelope, run_hook
from .logging import configure_logging
from .models import Diagnostic
from .orchestrator import Orchestrator
from .reporter import EXIT_CLEAN, EXIT_DIAGNOSTICS, format_report, to_json


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="entitylint",
        description="Validate Doctrine ORM entity files after they are written.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .entitylint.yml or the directory holding it.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    hook_parser = subparsers.add_parser(
        "hook",
        help="Read a PostToolUse hook envelope from stdin and validate the edited file.",
    )
    _add_verbose_option(hook_parser, suppress_default=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Validate PHP files or directories directly.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files or directories to validate (directories are searched for *.php).",
    )
    check_parser.add_argument(
        "--format",
        choices=("human", "json"),
        default="human",
        help="Output format (default: human).",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for entitylint commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file, quiet=_is_quiet(args))

    if args.command == "hook":
        try:
            return _run_hook_command(args)
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"entitylint hook failed: {exc}\nRun with --verbose for more details.\n")
    elif args.command == "check":
        try:
            return _run_check_command(args)
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"entitylint check failed: {exc}\nRun with --verbose for more details.\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")
    return EXIT_CLEAN  # pragma: no cover


def _run_hook_command(args: argparse.Namespace) -> int:
    request = parse_envelope(sys.stdin.read())
    if request is None:
        return EXIT_CLEAN
    config = Orchestrator.load_settings(args.config or request.cwd)
    _apply_config_logging(args, config)
    return run_hook(request, config, sys.stderr)


def _run_check_command(args: argparse.Namespace) -> int:
    config = Orchestrator.load_settings(args.config or Path.cwd())
    _apply_config_logging(args, config)
    orchestrator = Orchestrator(config)

    results: Dict[Path, List[Diagnostic]] = {}
    for path in _iter_php_files(args.paths):
        diagnostics = orchestrator.validate(path)
        if diagnostics is not None:
            results[path] = diagnostics

    if args.format == "json":
        payload = [to_json(path, diagnostics) for path, diagnostics in results.items()]
        print(json.dumps(payload, indent=2))
    else:
        blocks = [format_report(path, diagnostics) for path, diagnostics in results.items()]
        for block in blocks:
            if block:
                print(block)

    if any(results.values()):
        return EXIT_DIAGNOSTICS
    return EXIT_CLEAN


def _apply_config_logging(args: argparse.Namespace, config: EntityLintConfig) -> None:
    if args.log_file is None and config.log_file is not None:
        configure_logging(verbose=bool(args.verbose), log_file=config.log_file, quiet=_is_quiet(args))


def _is_quiet(args: argparse.Namespace) -> bool:
    # Hook stderr is reserved for the validation report.
    return args.command == "hook"


def _iter_php_files(paths: Sequence[Path]) -> Iterator[Path]:
    for path in paths:
        if path.is_dir():
            yield from sorted(candidate for candidate in path.rglob("*.php") if candidate.is_file())
        else:
            yield path


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
