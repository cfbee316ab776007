"""CLI entrypoints for slnsync commands."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from .config import ConfigError, load_config
from .engine import SyncEngine
from .logging import configure_logging
from .postproc import HookChain
from .providers import DEFAULT_GRAPH_FILE, ManifestGraphProvider


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


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--graph",
        default=None,
        help=f"Graph snapshot file (defaults to <path>/{DEFAULT_GRAPH_FILE}).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write detailed logs to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slnsync",
        description="Keep solution and project files in sync with a compilation-unit graph.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Regenerate the solution and every project file.",
    )
    _add_common_arguments(sync_parser)
    sync_parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip the build verification step after writing.",
    )

    incremental_parser = subparsers.add_parser(
        "sync-if-needed",
        help="Rewrite only the projects implicated by changed files.",
    )
    _add_common_arguments(incremental_parser)
    incremental_parser.add_argument(
        "--affected",
        nargs="*",
        default=[],
        help="Paths that were added, deleted or moved.",
    )
    incremental_parser.add_argument(
        "--reimported",
        nargs="*",
        default=[],
        help="Paths that were reimported.",
    )

    return parser


def _build_engine(args: argparse.Namespace, parser: argparse.ArgumentParser) -> SyncEngine:
    root = Path(args.path).expanduser().resolve()
    try:
        config = load_config(root)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    if getattr(args, "no_verify", False):
        config = replace(config, verify=replace(config.verify, enabled=False))

    graph_path = Path(args.graph) if args.graph else root / DEFAULT_GRAPH_FILE
    provider = ManifestGraphProvider(
        graph_path,
        root,
        included_package_sources=config.packages.include,
    )
    hooks = HookChain()
    hooks.load_entry_points()
    return SyncEngine(root, provider, config=config, hooks=hooks)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for slnsync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file).expanduser() if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)
    engine = _build_engine(args, parser)

    if args.command == "sync":
        if not engine.sync():
            parser.exit(1, "slnsync sync failed\nRun with --verbose for more details.\n")
        print(f"Solution synced at {_relativize(engine.solution_path())}")
    elif args.command == "sync-if-needed":
        written = engine.sync_if_needed(args.affected, args.reimported)
        if engine.last_error:
            parser.exit(1, f"slnsync sync-if-needed failed: {engine.last_error}\n")
        print("Project files updated" if written else "Project files already up to date")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


__all__ = ["main"]


if __name__ == "__main__":
    main(sys.argv[1:])
