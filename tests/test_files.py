"""Tests for repoprobe.files."""

from __future__ import annotations

import pytest

from repoprobe.errors import AccessDenied, AlreadyExists, InvalidPattern, NotFound
from repoprobe.files import FileOperations, format_numbered, split_lines
from repoprobe.sandbox import PathSandbox
from tests._fixtures.project_builder import ProjectBuilder


def _files(project_builder: ProjectBuilder) -> FileOperations:
    return FileOperations(PathSandbox(project_builder.root), max_workers=2)


def test_split_lines_ignores_trailing_newline() -> None:
    assert split_lines("") == []
    assert split_lines("a\nb\n") == ["a", "b"]
    assert split_lines("a\nb") == ["a", "b"]
    assert split_lines("a\n\n") == ["a", ""]


def test_format_numbered_clamps_range() -> None:
    lines = [f"line {number}" for number in range(1, 11)]

    text = format_numbered("notes.txt", lines, 5, 20)

    header, rule, *body = text.split("\n")
    assert header == "File: notes.txt (lines 5-10 of 10)"
    assert rule == "─" * 60
    assert body[0] == "   5 | line 5"
    assert body[-1] == "  10 | line 10"
    assert len(body) == 6


def test_format_numbered_start_past_end_has_empty_body() -> None:
    text = format_numbered("notes.txt", ["a", "b"], 5, -1)

    assert text.split("\n") == ["File: notes.txt (lines 5-2 of 2)", "─" * 60]


def test_read_whole_file_and_range(project_builder: ProjectBuilder) -> None:
    project_builder.write({"notes.txt": "".join(f"line {n}\n" for n in range(1, 11))})
    files = _files(project_builder)

    whole = files.read("notes.txt")
    ranged = files.read("notes.txt", 0, 2)

    assert whole.startswith("File: notes.txt (lines 1-10 of 10)\n")
    assert ranged.split("\n")[2:] == ["   1 | line 1", "   2 | line 2"]


def test_read_missing_or_directory_raises_not_found(project_builder: ProjectBuilder) -> None:
    project_builder.write({"app/Models/User.php": "<?php\n"})
    files = _files(project_builder)

    with pytest.raises(NotFound, match="File not found: missing.txt"):
        files.read("missing.txt")
    with pytest.raises(NotFound):
        files.read("app")


def test_read_outside_root_is_denied(project_builder: ProjectBuilder) -> None:
    with pytest.raises(AccessDenied):
        _files(project_builder).read("../outside.txt")


def test_read_many_reports_per_path(project_builder: ProjectBuilder) -> None:
    project_builder.write({"a.txt": "alpha\n", "b.txt": "beta\n"})

    outcome = _files(project_builder).read_many(["a.txt", "missing.txt", "b.txt"])

    assert list(outcome) == ["a.txt", "missing.txt", "b.txt"]
    assert outcome["a.txt"] == {"success": True, "content": "alpha\n"}
    assert outcome["b.txt"] == {"success": True, "content": "beta\n"}
    assert outcome["missing.txt"] == {"success": False, "error": "File not found: missing.txt"}


def test_write_requires_existing_file(project_builder: ProjectBuilder) -> None:
    project_builder.write({"config.php": "old\n"})
    files = _files(project_builder)

    result = files.write("config.php", "new\ncontent")

    assert result["lines"] == 2
    assert (project_builder.root / "config.php").read_text(encoding="utf-8") == "new\ncontent"
    with pytest.raises(NotFound):
        files.write("absent.php", "x")
    assert not (project_builder.root / "absent.php").exists()


def test_create_makes_parents_and_refuses_overwrite(project_builder: ProjectBuilder) -> None:
    files = _files(project_builder)

    result = files.create("app/Services/Billing.php", "<?php\n")

    created = project_builder.root / "app" / "Services" / "Billing.php"
    assert created.read_text(encoding="utf-8") == "<?php\n"
    assert result["path"] == "app/Services/Billing.php"
    with pytest.raises(AlreadyExists, match="Use write_file to overwrite"):
        files.create("app/Services/Billing.php", "changed")
    assert created.read_text(encoding="utf-8") == "<?php\n"


def test_delete_removes_file(project_builder: ProjectBuilder) -> None:
    project_builder.write({"tmp.txt": "x\n"})
    files = _files(project_builder)

    result = files.delete("tmp.txt")

    assert result["message"] == "Successfully deleted tmp.txt"
    assert not (project_builder.root / "tmp.txt").exists()
    with pytest.raises(NotFound):
        files.delete("tmp.txt")


def test_replace_records_changes(project_builder: ProjectBuilder) -> None:
    project_builder.write({"app.php": "$a = foo();\n$b = 1;\n  foo(foo);\n"})

    report = _files(project_builder).replace("app.php", "foo", "bar")

    assert report.message == "Replaced 2 occurrence(s)"
    assert [change.to_dict() for change in report.changes] == [
        {"line": 1, "before": "$a = foo();", "after": "$a = bar();"},
        {"line": 3, "before": "foo(foo);", "after": "bar(bar);"},
    ]
    assert (project_builder.root / "app.php").read_text(encoding="utf-8") == (
        "$a = bar();\n$b = 1;\n  bar(bar);\n"
    )


def test_replace_preserves_line_endings(project_builder: ProjectBuilder) -> None:
    target = project_builder.root / "win.php"
    target.write_bytes(b"a foo\r\nb\r\n")

    _files(project_builder).replace("win.php", "foo", "bar")

    assert target.read_bytes() == b"a bar\r\nb\r\n"


def test_replace_without_matches_leaves_file_untouched(project_builder: ProjectBuilder) -> None:
    target = project_builder.root / "same.php"
    original = b"line one\r\nline two\n"
    target.write_bytes(original)

    report = _files(project_builder).replace("same.php", "absent", "present")

    assert report.to_dict() == {"file": "same.php", "message": "No matches found", "changes": []}
    assert target.read_bytes() == original


def test_replace_with_identical_text_is_byte_identical(project_builder: ProjectBuilder) -> None:
    target = project_builder.root / "same.php"
    original = b"foo\r\nbar foo\n\n"
    target.write_bytes(original)

    _files(project_builder).replace("same.php", "foo", "foo")

    assert target.read_bytes() == original


def test_replace_rejects_empty_search(project_builder: ProjectBuilder) -> None:
    project_builder.write({"app.php": "x\n"})

    with pytest.raises(InvalidPattern):
        _files(project_builder).replace("app.php", "", "y")


def test_read_related_collects_existing_siblings(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/Button.tsx": "export const Button = () => null;\n",
            "src/Button.module.css": ".btn {}\n",
            "src/Button.test.tsx": "test('renders', () => {});\n",
            "src/Other.css": ".other {}\n",
        }
    )

    context = _files(project_builder).read_related("src/Button.tsx")

    assert context["main"] == {
        "file": "src/Button.tsx",
        "content": "export const Button = () => null;\n",
    }
    assert [item["file"] for item in context["related"]] == [
        "src/Button.module.css",
        "src/Button.test.tsx",
    ]


def test_read_related_skips_siblings_linking_outside_root(
    project_builder: ProjectBuilder, tmp_path
) -> None:
    project_builder.write(
        {
            "src/Button.tsx": "export const Button = () => null;\n",
            "src/Button.test.tsx": "test('renders', () => {});\n",
        }
    )
    secret = tmp_path / "secret.txt"
    secret.write_text("TOP SECRET\n", encoding="utf-8")
    (project_builder.root / "src" / "Button.css").symlink_to(secret)

    context = _files(project_builder).read_related("src/Button.tsx")

    assert [item["file"] for item in context["related"]] == ["src/Button.test.tsx"]
    assert all("TOP SECRET" not in item["content"] for item in context["related"])


@pytest.mark.parametrize("end_line", [None, -1, 0, -5, 10, 99])
def test_format_numbered_clamps_end_to_last_line(end_line: int | None) -> None:
    lines = [f"line {number}" for number in range(1, 11)]

    text = format_numbered("notes.txt", lines, 5, end_line)

    header, _rule, *body = text.split("\n")
    assert header == "File: notes.txt (lines 5-10 of 10)"
    assert len(body) == 6
