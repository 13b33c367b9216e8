"""Git commands used for commit extraction."""

from pathlib import Path

from rich.markup import escape

from common.logger import get_logger

from .process import ExecutionResult, ProcessRunner, command_string, run_command

logger = get_logger(__name__)

# git --version
VERSION_ARGS = ("--version",)

# Abbreviated hashes of all commits, newest first
COMMITS_ARGS = ("log", "--no-color", "--pretty=format:%h")

# Committer date of one commit (commit id appended)
COMMITTER_DATE_ARGS = ("show", "--no-color", "-s", "--format=%ci")

# Commit header plus each changed file with its full content as context and
# renames shown as separate delete/add sections (commit id appended).
# Color, prefixes and external diff drivers are pinned so that user or
# repository config cannot change the lines the diff parser matches.
COMMIT_CHANGES_ARGS = (
    "show",
    "--no-color",
    "--no-ext-diff",
    "--src-prefix=a/",
    "--dst-prefix=b/",
    "-U100000",
    "--no-renames",
)

# Ends option parsing so a commit id is never read as an option
END_OF_OPTIONS = "--end-of-options"


def git_command(git_executable: str, *args: str) -> list[str]:
    """Build the argument vector for a git sub-command."""
    return [git_executable, *args]


def git_version(
    git_executable: str = "git",
    runner: ProcessRunner = run_command,
) -> ExecutionResult:
    """
    Check whether git is available.

    Args:
        git_executable: Name or path of the git binary
        runner: Process runner used to execute the command

    Returns:
        ExecutionResult of `git --version`
    """
    return runner(git_command(git_executable, *VERSION_ARGS), None)


def get_commit_ids(
    repo_root: Path,
    git_executable: str = "git",
    runner: ProcessRunner = run_command,
) -> list[str] | None:
    """
    Get the abbreviated hashes of all commits in a repository.

    Uses: git log --no-color --pretty=format:%h

    Args:
        repo_root: Path to git repository root
        git_executable: Name or path of the git binary
        runner: Process runner used to execute the command

    Returns:
        Commit ids (newest first), or None if the command failed or printed
        no commits
    """
    command = git_command(git_executable, *COMMITS_ARGS)
    result = runner(command, repo_root)

    if not result.successful:
        logger.error(
            f"Extracting the available commit ids failed: "
            f"'{escape(command_string(command))}' was not successful: "
            f"{escape(result.stderr.strip())}"
        )
        return None

    commit_ids = [line.strip() for line in result.stdout.split("\n") if line.strip()]
    if not commit_ids:
        logger.error("Commit log is empty, no commit ids to extract")
        return None

    return commit_ids


def get_committer_date(
    repo_root: Path,
    commit_id: str,
    git_executable: str = "git",
    runner: ProcessRunner = run_command,
) -> str | None:
    """
    Get the committer date of a commit.

    Uses: git show --no-color -s --format=%ci --end-of-options <commit_id>

    Returns:
        Date like "2024-01-15 10:30:00 +0100", or None if the command failed
    """
    result = runner(
        git_command(git_executable, *COMMITTER_DATE_ARGS, END_OF_OPTIONS, commit_id),
        repo_root,
    )
    if not result.successful:
        return None
    return result.stdout.strip()


def get_commit_content(
    repo_root: Path,
    commit_id: str,
    git_executable: str = "git",
    runner: ProcessRunner = run_command,
) -> str | None:
    """
    Get the full text of a commit: header, message and per-file diffs.

    Uses: git show --no-color --no-ext-diff --src-prefix=a/ --dst-prefix=b/
          -U100000 --no-renames --end-of-options <commit_id>

    Returns:
        Raw standard output, or None if the command failed
    """
    result = runner(
        git_command(git_executable, *COMMIT_CHANGES_ARGS, END_OF_OPTIONS, commit_id),
        repo_root,
    )
    if not result.successful:
        return None
    return result.stdout
