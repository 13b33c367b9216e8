"""Run an extraction and its consumer concurrently over one CommitQueue."""

import threading
from collections.abc import Callable
from dataclasses import dataclass

from common.logger import get_logger

from .commit_queue import CommitQueue
from .models import Commit

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Outcome of one producer/consumer run."""

    successful: bool
    commit_count: int


def run_pipeline(
    produce: Callable[[], bool],
    commit_queue: CommitQueue,
    handle: Callable[[Commit], None],
) -> PipelineResult:
    """
    Extract on a worker thread while the calling thread consumes.

    The queue is opened before the producer starts and closed when it returns
    or raises, then drained completely.

    Args:
        produce: Extraction call, e.g. lambda: extractor.extract_all(repo)
        commit_queue: Queue shared by producer and consumer
        handle: Called once per commit, in queue order

    Returns:
        PipelineResult with the producer's success flag and the number of
        consumed commits

    Raises:
        Exception: Whatever the producer raised, after the queue is drained
    """
    outcome: dict[str, object] = {"successful": False}

    def producer() -> None:
        try:
            outcome["successful"] = produce()
        except Exception as e:
            outcome["error"] = e
        finally:
            commit_queue.close()

    commit_queue.open()
    thread = threading.Thread(target=producer, name="commit-extractor", daemon=True)
    thread.start()

    commit_count = 0
    try:
        for commit in commit_queue.drain():
            handle(commit)
            commit_count += 1
    except BaseException:
        # Unblocks a producer waiting for space
        commit_queue.close()
        raise

    thread.join()

    error = outcome.get("error")
    if isinstance(error, Exception):
        raise error

    logger.debug(f"Consumed {commit_count} commit(s)")
    return PipelineResult(successful=bool(outcome["successful"]), commit_count=commit_count)
