"""Tests for selecting files to format."""

from xml_formatter.utils.files import anchor_pattern, get_included_files


def make_tree(base, paths):
    for rel_path in paths:
        path = base / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("<a/>")


def test_default_patterns(tmp_path):
    make_tree(tmp_path, [
        "pom.xml",
        "module/pom.xml",
        "module/src/main/resources/config.xml",
        "target/generated.xml",
        "module/target/classes/copy.xml",
        "README.md",
    ])

    assert get_included_files(tmp_path) == [
        "module/pom.xml",
        "module/src/main/resources/config.xml",
        "pom.xml",
    ]


def test_empty_excludes_replace_defaults(tmp_path):
    make_tree(tmp_path, ["pom.xml", "target/generated.xml"])

    assert get_included_files(tmp_path, excludes=[]) == ["pom.xml", "target/generated.xml"]


def test_custom_patterns(tmp_path):
    make_tree(tmp_path, ["pom.xml", "docs/site.xml", "docs/skip/old.xml", "layout.xhtml"])

    files = get_included_files(tmp_path, includes=["docs/**/*.xml", "*.xhtml"], excludes=["docs/skip/"])

    assert files == ["docs/site.xml", "layout.xhtml"]


def test_no_includes_selects_nothing(tmp_path):
    make_tree(tmp_path, ["pom.xml"])

    assert get_included_files(tmp_path, includes=None) == []
    assert get_included_files(tmp_path, includes=[]) == []


def test_missing_directory(tmp_path):
    assert get_included_files(tmp_path / "missing") == []


def test_slashless_patterns_match_base_directory_only(tmp_path):
    make_tree(tmp_path, ["pom.xml", "module/pom.xml", "module/old.xml"])

    assert get_included_files(tmp_path, includes=["*.xml"], excludes=[]) == ["pom.xml"]
    assert get_included_files(tmp_path, includes=["**/*.xml"], excludes=["old.xml"]) == [
        "module/old.xml",
        "module/pom.xml",
        "pom.xml",
    ]


def test_anchor_pattern():
    assert anchor_pattern("*.xml") == "/*.xml"
    assert anchor_pattern("!pom.xml") == "!/pom.xml"
    assert anchor_pattern("**/*.xml") == "**/*.xml"
    assert anchor_pattern("docs/") == "docs/"
