"""
Extract commits from git repositories into a CommitQueue.

Three modes, each handing Commit records to the queue:

- extract_all: every commit listed by `git log`
- extract_selected: a caller-supplied list of commit ids
- extract_text: one commit parsed from supplied `git show` text, without
  running git

Per-commit failures (missing date or content) skip that commit and the run
continues. Only the initial listing of full extraction fails the whole run.
"""

import threading
from collections.abc import Iterable
from pathlib import Path

from rich.markup import escape

from common.constants import NO_DATE, SUPPORTED_VERSION_CONTROL_SYSTEMS
from common.logger import get_logger

from .commit_queue import CommitQueue
from .diff_parser import create_commit, parse_commit_id
from .git_utils import get_commit_content, get_commit_ids, get_committer_date, git_version
from .models import Commit
from .process import ProcessRunner, run_command

logger = get_logger(__name__)


class ExtractionSetupError(Exception):
    """Raised when an extractor cannot be used on this system."""


class GitCommitExtractor:
    """Extracts commits from git repositories on any operating system."""

    def __init__(
        self,
        commit_queue: CommitQueue,
        runner: ProcessRunner = run_command,
        git_executable: str = "git",
        enqueue_timeout: float | None = None,
    ):
        """Create an extractor and check that git is available.

        Args:
            commit_queue: Queue receiving the extracted commits
            runner: Process runner used for all git commands
            git_executable: Name or path of the git binary
            enqueue_timeout: Seconds to wait for queue space per commit, or
                None to wait until the consumer makes room

        Raises:
            ExtractionSetupError: If `git --version` does not succeed
        """
        self.commit_queue = commit_queue
        self.runner = runner
        self.git_executable = git_executable
        self.enqueue_timeout = enqueue_timeout
        self._cancelled = threading.Event()

        result = git_version(git_executable, runner)
        if not result.successful:
            raise ExtractionSetupError(f"Testing Git availability failed.\n{result.stderr}")

        logger.debug(f"{type(self).__name__} created ({escape(result.stdout.strip())})")

    @staticmethod
    def supports_operating_system(operating_system: str) -> bool:
        """Git extraction works on every operating system."""
        return True

    @staticmethod
    def supports_version_control_system(version_control_system: str) -> bool:
        return version_control_system.lower() in SUPPORTED_VERSION_CONTROL_SYSTEMS

    def cancel(self) -> None:
        """Abort any wait for queue space; the running extraction reports failure."""
        self._cancelled.set()
        self.commit_queue.wake_waiters()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def extract_all(self, repository: Path) -> bool:
        """
        Extract every commit of a repository.

        Args:
            repository: Path to the git repository

        Returns:
            True if the commit ids could be listed and every commit handed to
            the queue was accepted. False if listing failed, the log is empty,
            or enqueuing was aborted.
        """
        logger.debug(f"Full extraction of all available commits in {repository}")
        commit_ids = get_commit_ids(Path(repository), self.git_executable, self.runner)
        if commit_ids is None:
            return False
        return self._extract_commits(Path(repository), commit_ids)

    def extract_selected(self, repository: Path, commit_ids: Iterable[str]) -> bool:
        """
        Extract the given commits of a repository.

        Unknown commit ids are skipped with a warning. An empty list is a
        successful extraction of nothing.

        Returns:
            True unless enqueuing was aborted
        """
        logger.debug(f"Selective extraction of listed commits in {repository}")
        return self._extract_commits(Path(repository), list(commit_ids))

    def extract_text(self, commit_text: str) -> bool:
        """
        Parse a single commit from its `git show` output.

        The text must start with "commit <id>". No git command runs and the
        commit gets the NO_DATE committer date.

        Returns:
            True if the commit id was found and the commit was enqueued
        """
        logger.debug("Extraction (parsing) of single commit")
        commit_id = parse_commit_id(commit_text)
        if commit_id is None:
            logger.error(
                'Identifying the commit id failed: the given text does not start with "commit <ID> ..."'
            )
            return False

        return self._enqueue(create_commit(commit_id, NO_DATE, commit_text))

    def _extract_commits(self, repository: Path, commit_ids: list[str]) -> bool:
        for commit_id in commit_ids:
            logger.debug(f"Extracting commit {escape(commit_id)}")

            committer_date = get_committer_date(
                repository, commit_id, self.git_executable, self.runner
            )
            if committer_date is None:
                logger.warning(f"Committer date not available for commit {escape(commit_id)}")
                continue

            commit_content = get_commit_content(
                repository, commit_id, self.git_executable, self.runner
            )
            if commit_content is None:
                logger.warning(f"Commit content not available for commit {escape(commit_id)}")
                continue

            if not self._enqueue(create_commit(commit_id, committer_date, commit_content)):
                return False

        return True

    def _enqueue(self, commit: Commit) -> bool:
        logger.debug(f"Adding commit {escape(commit.id)} to queue")
        added = self.commit_queue.put_wait(
            commit,
            timeout=self.enqueue_timeout,
            cancel_event=self._cancelled,
        )
        if not added:
            logger.error(
                f"Commit {escape(commit.id)} was not added to the queue "
                "(queue closed or wait aborted)"
            )
        return added
