"""
Parse the raw output of `git show` into commit records.

The output is not parsed with a diff grammar. Two line prefixes drive a small
state machine:

- "diff --git" starts the diff header of a new changed artifact
- "@@" is the last line of that diff header; every following line up to the
  next "diff --git" is artifact content

The text is expected to come from `git show -U100000 --no-renames` with color
off and the default a/ b/ prefixes, so each changed file appears as its own
section with its full content as context.
Parsing never fails: malformed text yields a best-effort record.
"""

import re

from .models import ChangedArtifact, Commit

DIFF_HEADER_START_PATTERN = "diff --git"
DIFF_HEADER_END_PATTERN = "@@"

COMMIT_LINE_PREFIX = "commit "

_COMMIT_ID_RE = re.compile(r"commit (\S*)")


def split_lines(text: str) -> list[str]:
    """Split text on newlines, keeping empty lines including a trailing one."""
    return text.split("\n")


def index_of_line_starting_with(lines: list[str], prefix: str) -> int:
    """Return the index of the first line starting with prefix, or -1."""
    for index, line in enumerate(lines):
        if line.startswith(prefix):
            return index
    return -1


def get_artifact_path(first_diff_header_line: str) -> str:
    """
    Get the repository-relative path from a "diff --git a/<path> b/<path>" line.

    The last whitespace-separated token starting with "b/" wins and keeps its
    slash, so "b/x/y.c" becomes "/x/y.c".

    Args:
        first_diff_header_line: Line starting with DIFF_HEADER_START_PATTERN

    Returns:
        Path of the changed artifact, or "" if the line has fewer than four
        tokens or no "b/" token
    """
    parts = first_diff_header_line.split()
    # "diff", "--git", "a/...", "b/..."
    if len(parts) < 4:
        return ""
    for part in reversed(parts):
        if part.startswith("b/"):
            return part[1:]
    return ""


def get_artifact_name(artifact_path: str) -> str:
    """Return the final segment of an artifact path ("" for an empty path)."""
    return artifact_path.rsplit("/", 1)[-1]


def parse_artifacts(lines: list[str]) -> list[ChangedArtifact]:
    """
    Split diff lines into changed artifacts.

    Args:
        lines: Lines starting with the first DIFF_HEADER_START_PATTERN line

    Returns:
        Changed artifacts in order of appearance
    """
    artifacts: list[ChangedArtifact] = []
    artifact: ChangedArtifact | None = None
    content_reached = False

    for line in lines:
        if line.startswith(DIFF_HEADER_START_PATTERN):
            if artifact is not None:
                artifacts.append(artifact)
            path = get_artifact_path(line)
            artifact = ChangedArtifact(
                path=path,
                name=get_artifact_name(path),
                diff_header=[line],
            )
            content_reached = False
        elif artifact is None:
            # Only reachable when called with lines not starting at a marker
            continue
        elif content_reached:
            artifact.content.append(line)
        else:
            artifact.diff_header.append(line)
            content_reached = line.startswith(DIFF_HEADER_END_PATTERN)

    if artifact is not None:
        artifacts.append(artifact)

    return artifacts


def parse_commit_text(text: str) -> tuple[list[str], list[ChangedArtifact] | None]:
    """
    Split one commit's raw text into its header and changed artifacts.

    Commits without any file-level diff (e.g. some merge commits) are not an
    error: their whole text becomes the header.

    Args:
        text: Complete output of `git show` for one commit

    Returns:
        Tuple of (header lines, changed artifacts). The artifacts are None if
        the text has no DIFF_HEADER_START_PATTERN line.
    """
    lines = split_lines(text)
    diff_start = index_of_line_starting_with(lines, DIFF_HEADER_START_PATTERN)

    if diff_start < 0:
        return lines, None

    return lines[:diff_start], parse_artifacts(lines[diff_start:])


def create_commit(commit_id: str, date: str, text: str) -> Commit:
    """Create a Commit from its identifier, committer date and raw text."""
    header, changed_artifacts = parse_commit_text(text)
    return Commit(id=commit_id, date=date, header=header, changed_artifacts=changed_artifacts)


def parse_commit_id(text: str) -> str | None:
    """
    Get the commit identifier from text starting with "commit <id>".

    Args:
        text: Raw commit text as printed by `git show` or `git log -p`

    Returns:
        The identifier, or None if the text does not start with the commit
        line or the identifier is empty
    """
    if not text.startswith(COMMIT_LINE_PREFIX):
        return None
    match = _COMMIT_ID_RE.match(text)
    commit_id = match.group(1) if match else ""
    return commit_id or None
