"""Shared constants for commit-extract.

For environment-based configuration (queue capacity, timeouts, etc.), use the env module:
    from common.env import env
    capacity = env.commit_queue_capacity()
"""

# Number of commits buffered between extractor and consumer
DEFAULT_QUEUE_CAPACITY = 10

# Committer date used when a commit is parsed from supplied text
NO_DATE = "<no_date>"

# Version control systems the extractors in this package support
SUPPORTED_VERSION_CONTROL_SYSTEMS: set[str] = {"git"}
