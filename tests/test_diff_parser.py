from md_i18n.diff_parser import parse_hunk_header, parse_unified_diff


def _diff(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def test_parse_single_file_diff_with_two_hunks():
    raw = _diff(
        "diff --git a/docs/en/guide.md b/docs/en/guide.md",
        "index 1234567..89abcde 100644",
        "--- a/docs/en/guide.md",
        "+++ b/docs/en/guide.md",
        "@@ -1,3 +1,4 @@",
        " # Guide",
        "+",
        "+New intro line.",
        " ",
        "-Old text.",
        "@@ -10 +11 @@ ## Usage",
        "-foo",
        "+bar",
    )

    hunks = parse_unified_diff(raw)

    assert len(hunks) == 2
    first, second = hunks
    assert (first.old_start, first.old_count, first.new_start, first.new_count) == (1, 3, 1, 4)
    assert first.added_lines == ["", "New intro line."]
    assert first.deleted_lines == ["Old text."]
    assert first.context_lines == ["# Guide", ""]
    assert first.header == "@@ -1,3 +1,4 @@"
    assert first.operation is None

    # Omitted counts default to 1.
    assert (second.old_start, second.old_count, second.new_start, second.new_count) == (10, 1, 11, 1)
    assert second.deleted_lines == ["foo"]
    assert second.added_lines == ["bar"]


def test_empty_diff_has_no_hunks():
    assert parse_unified_diff("") == []


def test_hunk_count_matches_header_count_across_files():
    raw = _diff(
        "diff --git a/a.md b/a.md",
        "--- a/a.md",
        "+++ b/a.md",
        "@@ -1,2 +1,2 @@",
        "-one",
        "+uno",
        " two",
        "@@ -8 +8,2 @@",
        " eight",
        "+nine",
        "diff --git a/b.md b/b.md",
        "--- a/b.md",
        "+++ b/b.md",
        "@@ -3 +3 @@",
        "-three",
        "+tres",
    )

    hunks = parse_unified_diff(raw)

    assert len(hunks) == raw.count("\n@@ ")
    # The second file's headers must not leak into the previous hunk.
    assert hunks[1].added_lines == ["nine"]
    assert hunks[1].deleted_lines == []
    assert hunks[2].deleted_lines == ["three"]


def test_no_newline_marker_is_ignored_without_closing_hunk():
    raw = _diff(
        "@@ -1 +1 @@",
        "-a",
        "\\ No newline at end of file",
        "+b",
        "\\ No newline at end of file",
    )

    hunks = parse_unified_diff(raw)

    assert len(hunks) == 1
    assert hunks[0].deleted_lines == ["a"]
    assert hunks[0].added_lines == ["b"]


def test_deleted_frontmatter_delimiters_are_content_not_headers():
    raw = _diff(
        "--- a/page.md",
        "+++ b/page.md",
        "@@ -1,4 +1 @@",
        "----",
        "-title: Page",
        "----",
        " # Page",
    )

    hunks = parse_unified_diff(raw)

    assert len(hunks) == 1
    assert hunks[0].deleted_lines == ["---", "title: Page", "---"]
    assert hunks[0].context_lines == ["# Page"]


def test_malformed_header_is_not_a_hunk():
    raw = _diff(
        "@@ this is not a header @@",
        "-a",
        "+b",
    )

    assert parse_unified_diff(raw) == []


def test_parse_hunk_header_requires_both_ranges():
    assert parse_hunk_header("@@ -1,2 @@") is None
    hunk = parse_hunk_header("@@ -0,0 +1,3 @@")
    assert hunk is not None
    assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (0, 0, 1, 3)
