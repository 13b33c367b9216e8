"""Data models for extracted commits."""

from dataclasses import dataclass, field


@dataclass
class ChangedArtifact:
    """A single file touched by a commit.

    Filled line by line while a commit's diff text is parsed and left
    untouched afterwards.
    """

    path: str = ""  # e.g. "/src/main.c" ("b/" prefix minus the "b")
    name: str = ""
    diff_header: list[str] = field(default_factory=list)
    content: list[str] = field(default_factory=list)


@dataclass
class Commit:
    """One repository revision handed from an extractor to a consumer.

    Attributes:
        id: Revision identifier, e.g. an abbreviated hash
        date: Committer date, or NO_DATE for commits parsed from supplied text
        header: Lines preceding the first diff section (all lines if there is none)
        changed_artifacts: Artifacts in order of appearance, or None if the
            commit text contains no diff section at all
    """

    id: str
    date: str
    header: list[str]
    changed_artifacts: list[ChangedArtifact] | None = None

    @property
    def has_diff(self) -> bool:
        """Whether a diff section was found in the commit text."""
        return self.changed_artifacts is not None
