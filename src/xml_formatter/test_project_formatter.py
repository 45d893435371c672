"""Tests for formatting whole projects."""

import os

import pytest

from xml_formatter.modules.errors import ConfigError
from xml_formatter.modules.formatter import FormatStatus
from xml_formatter.modules.project_formatter import (
    FormatRun,
    FormatterConfig,
    format_directories,
    format_project
)

POM = (b'<?xml version="1.0" encoding="UTF-8"?><project><modelVersion>4.0.0</modelVersion>'
       b'<groupId>org.example</groupId><artifactId>demo</artifactId></project>')


def expected_pom():
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<project>',
        '    <modelVersion>4.0.0</modelVersion>',
        '    <groupId>org.example</groupId>',
        '    <artifactId>demo</artifactId>',
        '</project>',
    ]
    return "".join(line + os.linesep for line in lines).encode()


def test_pom_is_formatted_then_unchanged(tmp_path):
    pom = tmp_path / "pom.xml"
    pom.write_bytes(POM)
    config = FormatterConfig(base_directory=str(tmp_path))

    first = format_project(config)
    assert [result.status for result in first.results] == [FormatStatus.REWRITTEN]
    assert pom.read_bytes() == expected_pom()

    second = format_project(config)
    assert [result.status for result in second.results] == [FormatStatus.UNCHANGED]
    assert pom.read_bytes() == expected_pom()


def test_target_folder_is_excluded(tmp_path):
    generated = tmp_path / "target" / "generated.xml"
    generated.parent.mkdir()
    generated.write_bytes(POM)

    summary = format_project(FormatterConfig(base_directory=str(tmp_path)))

    assert summary.results == []
    assert generated.read_bytes() == POM


def test_files_are_formatted_once_per_run(tmp_path):
    pom = tmp_path / "pom.xml"
    pom.write_bytes(POM)
    config = FormatterConfig(base_directory=str(tmp_path))
    run = FormatRun()

    format_project(config, run)
    pom.write_bytes(POM)
    summary = format_project(config, run)

    assert summary.results == []
    assert summary.already_processed == 1
    assert pom.read_bytes() == POM
    assert str(pom) in run


def test_nested_directories_share_a_run(tmp_path):
    module_pom = tmp_path / "module" / "pom.xml"
    module_pom.parent.mkdir()
    module_pom.write_bytes(POM)
    (tmp_path / "pom.xml").write_bytes(POM)

    summary = format_directories([str(tmp_path), str(tmp_path / "module")], FormatterConfig())

    assert summary.count(FormatStatus.REWRITTEN) == 2
    assert summary.already_processed == 1


def test_failures_do_not_stop_the_run(tmp_path):
    (tmp_path / "a_broken.xml").write_bytes(b"<a><b></a>")
    (tmp_path / "b_good.xml").write_bytes(POM)

    summary = format_project(FormatterConfig(base_directory=str(tmp_path), line_ending="LF"))

    assert [result.status for result in summary.results] == [FormatStatus.FAILED, FormatStatus.REWRITTEN]
    assert len(summary.failed) == 1
    assert summary.rewritten[0].path == str(tmp_path / "b_good.xml")


def test_unknown_line_ending_touches_nothing(tmp_path):
    pom = tmp_path / "pom.xml"
    pom.write_bytes(POM)

    with pytest.raises(ConfigError):
        format_project(FormatterConfig(base_directory=str(tmp_path), line_ending="UNIX"))

    assert pom.read_bytes() == POM


def test_missing_base_directory(tmp_path):
    with pytest.raises(ConfigError):
        format_project(FormatterConfig(base_directory=str(tmp_path / "missing")))


def test_any_invalid_directory_stops_before_formatting(tmp_path):
    pom = tmp_path / "pom.xml"
    pom.write_bytes(POM)

    with pytest.raises(ConfigError):
        format_directories([str(tmp_path), str(tmp_path / "missing")], FormatterConfig())

    assert pom.read_bytes() == POM


def test_unexpected_errors_are_contained(tmp_path, monkeypatch):
    (tmp_path / "pom.xml").write_bytes(POM)

    def explode(request, hasher=None):
        raise RuntimeError("boom")

    monkeypatch.setattr("xml_formatter.modules.project_formatter.format_file", explode)
    summary = format_project(FormatterConfig(base_directory=str(tmp_path)))

    assert summary.results[0].status is FormatStatus.FAILED
    assert summary.results[0].reason == "boom"


def test_format_run_claim():
    run = FormatRun()
    assert run.claim("/p/pom.xml")
    assert not run.claim("/p/pom.xml")
    assert len(run) == 1
    assert run.processed == frozenset({"/p/pom.xml"})


def test_config_from_settings():
    settings = {"use_tabs": True, "line_ending": "CRLF", "excludes": [], "port": 5000}

    config = FormatterConfig.from_settings(settings, line_ending="LF", encoding=None)

    assert config.use_tabs is True
    assert config.line_ending == "LF"
    assert config.excludes == []
    assert config.includes == ["**/*.xml"]
    assert config.to_settings()["line_ending"] == "LF"


def test_unknown_encoding_is_config_error(tmp_path):
    pom = tmp_path / "pom.xml"
    pom.write_bytes(POM)

    with pytest.raises(ConfigError, match="Unknown encoding"):
        format_project(FormatterConfig(base_directory=str(tmp_path), encoding="no-such-codec"))

    assert pom.read_bytes() == POM
