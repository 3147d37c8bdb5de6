"""Tests for the state and lock file text adapters."""

import os

import pytest
from unittest.mock import patch

from puppetcheck.check.statefile import (
    extract_run_record,
    extract_token,
    is_readable_state_file,
    parse_disabled_reason,
    path_exists,
)

LAST_RUN_SUMMARY = """---
  version:
    config: 1419868203
    puppet: "3.7.3"
  resources:
    changed: 0
    failed: 0
    failed_to_restart: 0
    out_of_sync: 0
    total: 180
  time:
    config_retrieval: 1.53
    total: 4.82
    last_run: 1419868232
  changes:
    total: 0
  events:
    failure: 0
    success: 0
    total: 0
"""


def test_extract_token_second_field():
    assert extract_token("  time:\n    last_run: 1419868232\n", "last_run:") == "1419868232"


def test_extract_token_missing_label():
    assert extract_token("  version:\n", "last_run:") == ""


def test_extract_token_label_without_value():
    assert extract_token("    last_run:\n", "last_run:") == ""


def test_extract_token_first_match_wins():
    text = "    failed: 2\n    failed: 0\n"
    assert extract_token(text, "failed:") == "2"


def test_extract_run_record_full_summary():
    record = extract_run_record(LAST_RUN_SUMMARY)
    assert record == {
        "last_run": "1419868232",
        "config": "1419868203",
        "puppet": '"3.7.3"',
        "failed": "0",
        "failure": "0",
        "failed_to_restart": "0",
    }


def test_failed_label_does_not_match_failed_to_restart():
    record = extract_run_record("    failed_to_restart: 3\n")
    assert record["failed"] == ""
    assert record["failed_to_restart"] == "3"


def test_config_label_ignores_config_retrieval():
    record = extract_run_record("    config_retrieval: 1.53\n")
    assert record["config"] == ""


def test_extract_run_record_empty_text():
    record = extract_run_record("")
    assert set(record) == {"last_run", "config", "puppet", "failed", "failure", "failed_to_restart"}
    assert all(v == "" for v in record.values())


def test_parse_disabled_reason():
    assert parse_disabled_reason('{"disabled_message":"maintenance"}') == "maintenance"


def test_parse_disabled_reason_trailing_newline():
    assert parse_disabled_reason('{"disabled_message":"kernel upgrade by ops"}\n') == "kernel upgrade by ops"


def test_parse_disabled_reason_unexpected_content():
    assert parse_disabled_reason("locked") == "locked"


def test_readable_state_file(tmp_path):
    state = tmp_path / "last_run_summary.yaml"
    state.write_text(LAST_RUN_SUMMARY)
    assert is_readable_state_file(str(state)) is True


def test_empty_state_file_not_readable(tmp_path):
    state = tmp_path / "last_run_summary.yaml"
    state.write_text("")
    assert is_readable_state_file(str(state)) is False


def test_missing_state_file_not_readable(tmp_path):
    assert is_readable_state_file(str(tmp_path / "nope.yaml")) is False


def test_directory_not_readable_state_file(tmp_path):
    assert is_readable_state_file(str(tmp_path)) is False


@pytest.mark.skipif(os.geteuid() == 0, reason="root can read any file")
def test_unreadable_state_file(tmp_path):
    state = tmp_path / "last_run_summary.yaml"
    state.write_text(LAST_RUN_SUMMARY)
    state.chmod(0)
    assert is_readable_state_file(str(state)) is False


def test_path_exists(tmp_path):
    lock = tmp_path / "agent_disabled.lock"
    assert path_exists(str(lock)) is False
    lock.write_text('{"disabled_message":"maintenance"}')
    assert path_exists(str(lock)) is True


@patch("puppetcheck.check.statefile.Path.stat", side_effect=PermissionError(13, "Permission denied"))
def test_path_exists_permission_denied(mock_stat):
    assert path_exists("/opt/puppetlabs/puppet/cache/state/agent_disabled.lock") is False
