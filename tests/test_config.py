"""Tests for configuration loading."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from sqlbackup.helpers.config import (
    LOG_FILE_NAME,
    PathConfig,
    Settings,
    load_database_list,
    load_path_config,
    load_settings,
)


@pytest.mark.parametrize("primary,secondary", [
    ("C:\\B1", "C:\\B2"),
    ("/var/backups/sql", "/mnt/replica"),
    ("D:\\Backups With Spaces", "E:\\Copy"),
])
def test_log_file_is_inside_primary_path(tmp_path, primary, secondary):
    path_file = tmp_path / "path.txt"
    path_file.write_text(f"{primary}\n{secondary}\n")

    paths = load_path_config(path_file)

    assert paths.primary_path == Path(primary)
    assert paths.secondary_path == Path(secondary)
    assert paths.log_file == Path(os.path.join(primary, LOG_FILE_NAME))


def test_single_line_has_no_secondary(tmp_path):
    path_file = tmp_path / "path.txt"
    path_file.write_text("C:\\B1")

    paths = load_path_config(path_file)

    assert paths.primary_path == Path("C:\\B1")
    assert paths.secondary_path is None


def test_blank_second_line_has_no_secondary(tmp_path):
    path_file = tmp_path / "path.txt"
    path_file.write_text("C:\\B1\r\n   \r\n")

    paths = load_path_config(path_file)

    assert paths.primary_path == Path("C:\\B1")
    assert paths.secondary_path is None


def test_missing_path_file_aborts(tmp_path, caplog):
    with caplog.at_level(logging.INFO, logger="sqlbackup"):
        assert load_path_config(tmp_path / "path.txt") is None

    assert "Path file is missing. Cannot proceed." in caplog.text
    assert len(caplog.records) == 1


@pytest.mark.parametrize("content", ["", "\n", "   \nC:\\B2\n"])
def test_empty_path_file_aborts(tmp_path, caplog, content):
    path_file = tmp_path / "path.txt"
    path_file.write_text(content)

    with caplog.at_level(logging.INFO, logger="sqlbackup"):
        assert load_path_config(path_file) is None

    assert "Path file is empty" in caplog.text
    assert len(caplog.records) == 1


def test_unreadable_path_file_aborts(tmp_path, caplog):
    path_file = tmp_path / "path.txt"
    path_file.write_text("C:\\B1\n")

    with patch("sqlbackup.helpers.config._read_lines",
               side_effect=OSError("access denied")):
        with caplog.at_level(logging.INFO, logger="sqlbackup"):
            assert load_path_config(path_file) is None

    assert [r.getMessage() for r in caplog.records] == [
        "Error reading path file: access denied"]


def test_database_list_trims_and_skips_blank_lines(tmp_path):
    database_file = tmp_path / "database.txt"
    database_file.write_text("db1\n\n  db2  \r\n\t\nReporting\n")

    assert load_database_list(database_file) == ["db1", "db2", "Reporting"]


def test_database_list_ignores_utf8_bom(tmp_path):
    database_file = tmp_path / "database.txt"
    database_file.write_bytes("\ufeffdb1\r\ndb2\r\n".encode("utf-8"))

    assert load_database_list(database_file) == ["db1", "db2"]


def test_database_list_keeps_names_with_undecodable_bytes(tmp_path, caplog):
    # Saved as ANSI instead of UTF-8
    database_file = tmp_path / "database.txt"
    database_file.write_bytes("Sales\r\nVentes_Année\r\n".encode("cp1252"))

    with caplog.at_level(logging.INFO, logger="sqlbackup"):
        databases = load_database_list(database_file)

    assert databases == ["Sales", "Ventes_Ann\ufffde"]
    assert "Error reading database file" not in caplog.text


def test_unreadable_database_file_means_all(tmp_path, caplog):
    database_file = tmp_path / "database.txt"
    database_file.write_text("db1\n")

    with patch("sqlbackup.helpers.config._read_lines",
               side_effect=OSError("access denied")):
        with caplog.at_level(logging.INFO, logger="sqlbackup"):
            assert load_database_list(database_file) == []

    assert [r.getMessage() for r in caplog.records] == [
        "Error reading database file: access denied. Backup all databases."]


def test_missing_database_file_means_all(tmp_path, caplog):
    with caplog.at_level(logging.INFO, logger="sqlbackup"):
        assert load_database_list(tmp_path / "database.txt") == []

    assert "Database file is missing. Backup all databases." in caplog.text
    assert len(caplog.records) == 1


@pytest.mark.parametrize("content", ["", "\n\n", "   \n\t\n"])
def test_empty_database_file_means_all(tmp_path, caplog, content):
    database_file = tmp_path / "database.txt"
    database_file.write_text(content)

    with caplog.at_level(logging.INFO, logger="sqlbackup"):
        assert load_database_list(database_file) == []

    assert "Database file is empty. Backup all databases." in caplog.text
    assert len(caplog.records) == 1


def test_settings_defaults_without_file(tmp_path):
    settings = load_settings(tmp_path / ".config.yml")

    assert settings == Settings()
    assert settings.host == "localhost"
    assert settings.query_timeout == 120
    assert settings.progress_step == 10
    assert settings.chunk_size == 1024 * 1024


def test_settings_from_yaml(tmp_path):
    config_file = tmp_path / ".config.yml"
    config_file.write_text(
        "server:\n"
        "  host: SQL01\\PROD\n"
        "  driver: ODBC Driver 17 for SQL Server\n"
        "  encrypt: false\n"
        "  query_timeout: 30\n"
        "backup:\n"
        "  progress_step: 25\n"
    )

    settings = load_settings(config_file)

    assert settings.host == "SQL01\\PROD"
    assert settings.driver == "ODBC Driver 17 for SQL Server"
    assert settings.encrypt is False
    assert settings.trust_server_certificate is True
    assert settings.query_timeout == 30
    assert settings.progress_step == 25
    assert settings.chunk_size == 1024 * 1024


def test_settings_empty_yaml(tmp_path):
    config_file = tmp_path / ".config.yml"
    config_file.write_text("")

    assert load_settings(config_file) == Settings()


def test_path_config_is_plain_data():
    paths = PathConfig(primary_path=Path("B1"))

    assert paths.secondary_path is None
    assert paths.log_file == Path("B1") / "Log.txt"
