"""Commit list files and JSON-lines commit files."""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from .models import ChangedArtifact, Commit


def read_commit_list(file_path: Path) -> list[str]:
    """
    Read commit ids for selective extraction.

    One id per line; surrounding whitespace, blank lines and lines starting
    with "#" are ignored.

    Args:
        file_path: Path to the commit list file

    Returns:
        Commit ids in file order

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Commit list file not found: {file_path}")

    commit_ids = []
    for line in file_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            commit_ids.append(line)
    return commit_ids


def commit_to_dict(commit: Commit) -> dict:
    """Convert a commit to a JSON-serializable dict."""
    return {
        "id": commit.id,
        "date": commit.date,
        "header": commit.header,
        "changed_artifacts": (
            None
            if commit.changed_artifacts is None
            else [
                {
                    "path": artifact.path,
                    "name": artifact.name,
                    "diff_header": artifact.diff_header,
                    "content": artifact.content,
                }
                for artifact in commit.changed_artifacts
            ]
        ),
    }


def commit_from_dict(data: dict) -> Commit:
    """Rebuild a commit from commit_to_dict output."""
    artifacts = data.get("changed_artifacts")
    return Commit(
        id=data["id"],
        date=data["date"],
        header=list(data["header"]),
        changed_artifacts=(
            None
            if artifacts is None
            else [
                ChangedArtifact(
                    path=artifact["path"],
                    name=artifact["name"],
                    diff_header=list(artifact["diff_header"]),
                    content=list(artifact["content"]),
                )
                for artifact in artifacts
            ]
        ),
    )


def write_commit(stream: TextIO, commit: Commit) -> None:
    """Append one commit as a single JSON line."""
    stream.write(json.dumps(commit_to_dict(commit), ensure_ascii=False))
    stream.write("\n")


def write_commits_file(file_path: Path, commits: Iterable[Commit]) -> int:
    """
    Write commits as JSON lines.

    Returns:
        Number of commits written
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(file_path, "w", encoding="utf-8") as f:
        for commit in commits:
            write_commit(f, commit)
            count += 1
    return count


def read_commits_file(file_path: Path) -> list[Commit]:
    """
    Read commits written by write_commits_file or the CLI.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If a line is not a valid commit record
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Commits file not found: {file_path}")

    commits = []
    with open(file_path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                commits.append(commit_from_dict(json.loads(line)))
            except (json.JSONDecodeError, KeyError, TypeError) as e:
                raise ValueError(f"Invalid commit record in {file_path}:{line_number}: {e}") from e
    return commits
