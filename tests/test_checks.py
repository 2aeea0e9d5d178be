from pathlib import Path

from postkit.checks import ERROR, WARNING, Issue, check_file, check_text, has_errors

GOOD = "---\ntitle: Fine\ndate: 2024-01-15T10:00:00+02:00\ndraft: false\n---\n\n```java\nx\n```\n"


def test_clean_post_has_no_issues():
    assert check_text(GOOD) == []


def test_unterminated_fence_is_a_warning_with_file_line():
    text = GOOD + "\n```java\nclass A {}\n"
    [issue] = check_text(text)
    assert issue.severity == WARNING
    assert issue.code == "fence-unterminated"
    assert issue.line == 11
    assert "end of file" in issue.message
    assert not has_errors([issue])


def test_strict_fences_upgrade_to_error():
    text = GOOD + "\n```java\nclass A {}\n\nprose\n\n```java\ny\n```\n"
    [issue] = check_text(text, strict_fences=True)
    assert issue.severity == ERROR
    assert "next fence opens at line 16" in issue.message
    assert has_errors([issue])


def test_frontmatter_errors_and_warnings():
    missing = "---\ntitle: Fine\ndate: 2024-01-15T10:00:00+02:00\n---\nBody\n"
    [issue] = check_text(missing)
    assert issue.severity == ERROR
    assert issue.code == "frontmatter"
    assert "draft" in issue.message

    extras = "---\ntitle: Fine\ndate: 2024-01-15T10:00:00\ndraft: true\ntags: [java]\n---\n"
    issues = check_text(extras)
    assert [(i.code, i.line) for i in issues] == [("date-naive", 3), ("frontmatter-extra", 5)]
    assert all(i.severity == WARNING for i in issues)


def test_missing_frontmatter_still_scans_fences():
    issues = check_text("# Title\n\n```java\nx\n")
    assert [i.code for i in issues] == ["frontmatter", "fence-unterminated"]
    assert issues[1].line == 3


def test_issue_format():
    issue = Issue(WARNING, 12, "something odd", "x")
    assert issue.format(Path("post.md")) == "post.md:12: warning: something odd"
    assert Issue(ERROR, None, "bad", "x").format() == "<post>: error: bad"


def test_check_file(tmp_path):
    path = tmp_path / "post.md"
    path.write_text(GOOD + "```\n", encoding="utf-8")
    [issue] = check_file(path)
    assert issue.code == "fence-unterminated"


def test_check_file_reports_invalid_utf8(tmp_path):
    path = tmp_path / "latin1.md"
    path.write_bytes(GOOD.encode("utf-8") + b"caf\xe9\n")
    [issue] = check_file(path)
    assert issue.severity == ERROR
    assert issue.code == "encoding"
    assert issue.line == 10
    assert has_errors([issue])
