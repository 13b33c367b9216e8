"""Tests for parsing raw `git show` output into commits."""

from extraction.diff_parser import (
    create_commit,
    get_artifact_name,
    get_artifact_path,
    parse_commit_id,
    parse_commit_text,
)

SIMPLE_COMMIT = """commit 87d1eb2f72a8af00327aacccd5c1762bb59d602e
Author: Test User <test@example.com>
Date:   Mon Jan 15 10:30:00 2024 +0100

    Fix Kconfig dependency

diff --git a/drivers/staging/media/mt9t031/Kconfig b/drivers/staging/media/mt9t031/Kconfig
index 1234567..89abcde 100644
--- a/drivers/staging/media/mt9t031/Kconfig
+++ b/drivers/staging/media/mt9t031/Kconfig
@@ -1,3 +1,3 @@
 config SOC_CAMERA_MT9T031
-\ttristate "old"
+\ttristate "new"
 \tdepends on I2C
"""

MULTI_ARTIFACT_COMMIT = """commit b38ba5dd0819f849855dd139189ac0cfb964c901
Author: Test User <test@example.com>
Date:   Mon Jan 15 10:30:00 2024 +0100

    Add two files

diff --git a/file1.txt b/file1.txt
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/file1.txt
@@ -0,0 +1,2 @@
+line one
+line two
diff --git a/file2.txt b/file2.txt
new file mode 100644
index 0000000..0cfbf08
--- /dev/null
+++ b/file2.txt
@@ -0,0 +1 @@
+only line"""

PERMISSION_COMMIT = """commit 5ecf0bbbfe8adab9134a9ec456a30cbb20f7b47f
Author: Test User <test@example.com>
Date:   Mon Jan 15 10:30:00 2024 +0100

    Make file1 executable

diff --git a/file1.txt b/file1.txt
old mode 100644
new mode 100755
"""

MULTI_PERMISSION_COMMIT = """commit d16909177f80328ebc4cd6edea5147a16453a1bb
Author: Test User <test@example.com>
Date:   Mon Jan 15 10:30:00 2024 +0100

    Change permissions and content

diff --git a/file1.txt b/file1.txt
old mode 100644
new mode 100755
diff --git a/file2.txt b/file2.txt
old mode 100644
new mode 100755
diff --git a/file1.txt b/file1.txt
index e69de29..0cfbf08 100755
--- a/file1.txt
+++ b/file1.txt
@@ -1 +1,2 @@
 first
+second"""

MERGE_COMMIT = """commit 5d05dfd13f20b01a3cd5d293058baa7d5c1583b6
Merge: 1a2b3c4 5d6e7f8
Author: Test User <test@example.com>
Date:   Mon Jan 15 10:30:00 2024 +0100

    Merge branch 'feature'
"""


class TestArtifactPath:
    """Tests for get_artifact_path and get_artifact_name."""

    def test_path_keeps_leading_slash(self):
        assert get_artifact_path("diff --git a/x/y.c b/x/y.c") == "/x/y.c"

    def test_name_is_last_segment(self):
        assert get_artifact_name("/x/y.c") == "y.c"

    def test_top_level_file(self):
        path = get_artifact_path("diff --git a/file1.txt b/file1.txt")
        assert path == "/file1.txt"
        assert get_artifact_name(path) == "file1.txt"

    def test_fewer_than_four_tokens(self):
        path = get_artifact_path("diff --git b/x/y.c")
        assert path == ""
        assert get_artifact_name(path) == ""

    def test_no_b_token(self):
        assert get_artifact_path("diff --git a/x/y.c c/x/y.c") == ""

    def test_last_b_token_wins(self):
        assert get_artifact_path("diff --git b/first b/second") == "/second"

    def test_tabs_separate_tokens(self):
        assert get_artifact_path("diff\t--git a/x.c\tb/x.c") == "/x.c"

    def test_name_without_slash(self):
        assert get_artifact_name("Makefile") == "Makefile"

    def test_name_of_empty_path(self):
        assert get_artifact_name("") == ""


class TestParseCommitText:
    """Tests for splitting commit text into header and artifacts."""

    def test_no_diff_section_keeps_whole_text_as_header(self):
        header, artifacts = parse_commit_text(MERGE_COMMIT)

        assert header == MERGE_COMMIT.split("\n")
        assert artifacts is None

    def test_empty_text(self):
        header, artifacts = parse_commit_text("")

        assert header == [""]
        assert artifacts is None

    def test_header_holds_lines_before_first_diff(self):
        header, _ = parse_commit_text(SIMPLE_COMMIT)

        assert header[0] == "commit 87d1eb2f72a8af00327aacccd5c1762bb59d602e"
        assert header[-1] == ""
        assert len(header) == 6
        assert not any(line.startswith("diff --git") for line in header)

    def test_single_artifact(self):
        _, artifacts = parse_commit_text(SIMPLE_COMMIT)

        assert len(artifacts) == 1
        artifact = artifacts[0]
        assert artifact.path == "/drivers/staging/media/mt9t031/Kconfig"
        assert artifact.name == "Kconfig"
        assert artifact.diff_header == [
            "diff --git a/drivers/staging/media/mt9t031/Kconfig b/drivers/staging/media/mt9t031/Kconfig",
            "index 1234567..89abcde 100644",
            "--- a/drivers/staging/media/mt9t031/Kconfig",
            "+++ b/drivers/staging/media/mt9t031/Kconfig",
            "@@ -1,3 +1,3 @@",
        ]
        # Trailing newline of the output becomes a final empty content line
        assert artifact.content == [
            " config SOC_CAMERA_MT9T031",
            '-\ttristate "old"',
            '+\ttristate "new"',
            " \tdepends on I2C",
            "",
        ]

    def test_multiple_artifacts_in_order(self):
        _, artifacts = parse_commit_text(MULTI_ARTIFACT_COMMIT)

        assert [a.path for a in artifacts] == ["/file1.txt", "/file2.txt"]
        assert [a.name for a in artifacts] == ["file1.txt", "file2.txt"]
        assert artifacts[0].content == ["+line one", "+line two"]
        assert artifacts[1].content == ["+only line"]
        assert artifacts[1].diff_header[-1] == "@@ -0,0 +1 @@"

    def test_permission_only_change_has_no_content(self):
        _, artifacts = parse_commit_text(PERMISSION_COMMIT)

        assert len(artifacts) == 1
        assert artifacts[0].diff_header == [
            "diff --git a/file1.txt b/file1.txt",
            "old mode 100644",
            "new mode 100755",
            "",
        ]
        assert artifacts[0].content == []

    def test_repeated_paths_are_not_merged(self):
        _, artifacts = parse_commit_text(MULTI_PERMISSION_COMMIT)

        assert [a.name for a in artifacts] == ["file1.txt", "file2.txt", "file1.txt"]
        assert artifacts[0].content == []
        assert artifacts[1].content == []
        assert artifacts[2].content == [" first", "+second"]

    def test_artifact_count_matches_marker_count(self):
        sections = "\n".join(
            f"diff --git a/f{i} b/f{i}\n@@ -1 +1 @@\n+x{i}" for i in range(7)
        )
        _, artifacts = parse_commit_text("commit abc\n\n" + sections)

        assert len(artifacts) == 7
        assert [a.name for a in artifacts] == [f"f{i}" for i in range(7)]

    def test_text_starting_with_marker(self):
        header, artifacts = parse_commit_text("diff --git a/x b/x\n@@ -1 +1 @@\n+y")

        assert header == []
        assert len(artifacts) == 1
        assert artifacts[0].content == ["+y"]

    def test_hunk_marker_lines_after_first_go_to_content(self):
        text = "commit abc\ndiff --git a/x b/x\n@@ -1,2 +1,2 @@\n a\n@@ -10 +10 @@\n b"
        _, artifacts = parse_commit_text(text)

        assert artifacts[0].diff_header[-1] == "@@ -1,2 +1,2 @@"
        assert artifacts[0].content == [" a", "@@ -10 +10 @@", " b"]

    def test_malformed_marker_line_yields_empty_path(self):
        _, artifacts = parse_commit_text("commit abc\ndiff --git\n@@\n+z")

        assert artifacts[0].path == ""
        assert artifacts[0].name == ""
        assert artifacts[0].content == ["+z"]


class TestCreateCommit:
    def test_fields(self):
        commit = create_commit("b38ba5d", "2024-01-15 10:30:00 +0100", MULTI_ARTIFACT_COMMIT)

        assert commit.id == "b38ba5d"
        assert commit.date == "2024-01-15 10:30:00 +0100"
        assert commit.has_diff
        assert len(commit.changed_artifacts) == 2

    def test_merge_commit_has_no_diff(self):
        commit = create_commit("5d05dfd", "<no_date>", MERGE_COMMIT)

        assert not commit.has_diff
        assert commit.changed_artifacts is None
        assert commit.header == MERGE_COMMIT.split("\n")


class TestParseCommitId:
    def test_id_bounded_by_space(self):
        assert parse_commit_id("commit abc123 Merge: ...") == "abc123"

    def test_id_bounded_by_newline(self):
        assert parse_commit_id(MERGE_COMMIT) == "5d05dfd13f20b01a3cd5d293058baa7d5c1583b6"

    def test_id_at_end_of_text(self):
        assert parse_commit_id("commit abc123") == "abc123"

    def test_missing_prefix(self):
        assert parse_commit_id("Author: someone\ncommit abc") is None

    def test_empty_id(self):
        assert parse_commit_id("commit \nAuthor: someone") is None

    def test_empty_text(self):
        assert parse_commit_id("") is None
