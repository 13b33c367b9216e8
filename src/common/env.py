"""Environment configuration interface for commit-extract.

This module provides a clean interface for accessing environment variables,
centralizing all environment variable access in one place.
"""

import os

from dotenv import load_dotenv

from common.constants import DEFAULT_QUEUE_CAPACITY

# Load environment variables from .env file if it exists
load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def commit_queue_capacity() -> int:
        """Get the capacity of the commit queue.

        Returns:
            Maximum number of buffered commits, defaults to 10

        Raises:
            ValueError: If the configured value is not a positive integer
        """
        capacity = int(os.getenv("COMMIT_QUEUE_CAPACITY", str(DEFAULT_QUEUE_CAPACITY)))
        if capacity < 1:
            raise ValueError(f"COMMIT_QUEUE_CAPACITY must be positive, got {capacity}")
        return capacity

    @staticmethod
    def enqueue_timeout() -> float | None:
        """Get how long an extractor may wait for space in the commit queue.

        Returns:
            Timeout in seconds, or None (wait forever) if unset or empty
        """
        value = os.getenv("ENQUEUE_TIMEOUT", "").strip()
        if not value:
            return None
        return float(value)

    @staticmethod
    def git_executable() -> str:
        """Get the git executable used for extraction.

        Returns:
            Executable name or path, defaults to 'git'
        """
        return os.getenv("GIT_EXECUTABLE", "git")

    @staticmethod
    def version_control_system() -> str:
        """Get the version control system of the repositories to extract from.

        Returns:
            Version control system name, defaults to 'git'
        """
        return os.getenv("VERSION_CONTROL_SYSTEM", "git")

    @staticmethod
    def log_level() -> str:
        """Get the logging level.

        Returns:
            Upper-case level name, defaults to 'INFO'
        """
        return os.getenv("LOG_LEVEL", "INFO").upper()


# Singleton instance for convenient access
env = Environment()
