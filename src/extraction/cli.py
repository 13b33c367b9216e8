#!/usr/bin/env python3
"""CLI interface for commit extraction."""

import argparse
import sys
from collections.abc import Callable
from contextlib import ExitStack
from pathlib import Path

from rich.markup import escape

from common.env import env
from common.logger import error, progress, setup_logging, success, warning

from .commit_io import read_commit_list, write_commit
from .commit_queue import CommitQueue
from .extractor import ExtractionSetupError, GitCommitExtractor
from .models import Commit
from .pipeline import run_pipeline


def summarize_commit(commit: Commit) -> str:
    """One-line description of a commit for console output."""
    if commit.changed_artifacts is None:
        artifacts = "no diff"
    else:
        artifacts = f"{len(commit.changed_artifacts)} changed artifact(s)"
    return f"{escape(commit.id)}  {escape(commit.date)}  {artifacts}"


def run_extraction(args, produce: Callable[[GitCommitExtractor], bool]) -> int:
    """Create queue and extractor from args, run the pipeline and report.

    Args:
        args: Parsed command-line arguments
        produce: Extraction call for the chosen mode

    Returns:
        Exit code (0 for success, 1 for errors)
    """
    if not GitCommitExtractor.supports_version_control_system(args.vcs):
        error(f"Unsupported version control system: {args.vcs}")
        return 1

    commit_queue = CommitQueue(args.capacity)
    try:
        extractor = GitCommitExtractor(
            commit_queue,
            git_executable=args.git,
            enqueue_timeout=args.timeout,
        )
    except ExtractionSetupError as e:
        error(escape(str(e)))
        return 1

    with ExitStack() as stack:
        stream = None
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            stream = stack.enter_context(open(args.output, "w", encoding="utf-8"))

        def handle(commit: Commit) -> None:
            if stream is None:
                progress(summarize_commit(commit))
            else:
                write_commit(stream, commit)

        try:
            result = run_pipeline(lambda: produce(extractor), commit_queue, handle)
        except KeyboardInterrupt:
            extractor.cancel()
            error("Extraction interrupted")
            return 1

    if not result.successful:
        error(f"Extraction failed after {result.commit_count} commit(s)")
        return 1

    destination = f" to {args.output}" if args.output else ""
    success(f"Extracted {result.commit_count} commit(s){destination}")
    return 0


def cmd_full(args):
    """Extract all commits of a repository."""
    return run_extraction(args, lambda extractor: extractor.extract_all(args.repo))


def cmd_selective(args):
    """Extract the commits listed on the command line or in a commit list file."""
    commit_ids = list(args.commit or [])
    if args.commits_file:
        try:
            commit_ids.extend(read_commit_list(args.commits_file))
        except (FileNotFoundError, UnicodeDecodeError) as e:
            error(escape(str(e)))
            return 1

    if not commit_ids:
        warning(f"No commit ids listed in {escape(str(args.commits_file))}")

    return run_extraction(
        args, lambda extractor: extractor.extract_selected(args.repo, commit_ids)
    )


def cmd_interactive(args):
    """Parse a single commit from `git show` text in a file or on stdin."""
    try:
        if str(args.commit_file) == "-":
            commit_text = sys.stdin.read()
        else:
            commit_text = args.commit_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        error(escape(str(e)))
        return 1

    return run_extraction(args, lambda extractor: extractor.extract_text(commit_text))


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write commits as JSON lines to this file (default: print a summary)",
    )
    parser.add_argument(
        "--capacity",
        type=int,
        default=None,
        help="Commit queue capacity (default: COMMIT_QUEUE_CAPACITY or 10)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for queue space per commit (default: ENQUEUE_TIMEOUT or forever)",
    )
    parser.add_argument(
        "--git",
        default=None,
        help="Git executable (default: GIT_EXECUTABLE or 'git')",
    )
    parser.add_argument(
        "--vcs",
        default=None,
        help="Version control system of the repository (default: VERSION_CONTROL_SYSTEM or 'git')",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO, LOG_LEVEL overrides)",
    )


def apply_environment_defaults(args) -> None:
    """Fill options not given on the command line from the environment."""
    if args.capacity is None:
        args.capacity = env.commit_queue_capacity()
    if args.timeout is None:
        args.timeout = env.enqueue_timeout()
    if args.git is None:
        args.git = env.git_executable()
    if args.vcs is None:
        args.vcs = env.version_control_system()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract structured commits from git repositories"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    full_parser = subparsers.add_parser("full", help="Extract all commits of a repository")
    full_parser.add_argument("--repo", type=Path, required=True, help="Git repository directory")
    add_common_arguments(full_parser)
    full_parser.set_defaults(func=cmd_full)

    selective_parser = subparsers.add_parser(
        "selective", help="Extract selected commits of a repository"
    )
    selective_parser.add_argument(
        "--repo", type=Path, required=True, help="Git repository directory"
    )
    selective_parser.add_argument(
        "--commits-file",
        type=Path,
        default=None,
        help="File with one commit id per line",
    )
    selective_parser.add_argument(
        "--commit",
        action="append",
        help="Commit id to extract (repeatable)",
    )
    add_common_arguments(selective_parser)
    selective_parser.set_defaults(func=cmd_selective)

    interactive_parser = subparsers.add_parser(
        "interactive", help="Parse one commit from `git show` output"
    )
    interactive_parser.add_argument(
        "--commit-file",
        type=Path,
        required=True,
        help="File containing the commit text ('-' for stdin)",
    )
    add_common_arguments(interactive_parser)
    interactive_parser.set_defaults(func=cmd_interactive)

    return parser


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "selective" and not (args.commits_file or args.commit):
        parser.error("selective extraction needs --commits-file or --commit")

    try:
        apply_environment_defaults(args)
    except ValueError as e:
        error(f"Invalid configuration: {escape(str(e))}")
        return 1

    if args.capacity < 1:
        error(f"Queue capacity must be positive, got {args.capacity}")
        return 1

    setup_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    exit(main())
