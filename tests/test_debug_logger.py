#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for ideas/debug_logger.py JSON lines logging."""

import json

import pytest

from ideas.debug_logger import DebugLogger, get_logger, reset_logger


def read_events(state_dir):
    log = state_dir / "debug.log"
    if not log.exists():
        return []
    return [json.loads(line) for line in log.read_text().splitlines()]


class TestLevels:
    def test_default_level_is_one(self):
        assert DebugLogger().level == 1

    def test_env_level(self, monkeypatch):
        monkeypatch.setenv("IDEAS_DEBUG", "2")
        assert DebugLogger().level == 2

    def test_invalid_env_level_falls_back_to_one(self, monkeypatch):
        monkeypatch.setenv("IDEAS_DEBUG", "loud")
        assert DebugLogger().level == 1

    def test_settings_level_when_env_unset(self, tmp_path, monkeypatch):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"debugLevel": 0}))
        monkeypatch.setenv("IDEAS_SETTINGS", str(settings))
        assert DebugLogger().level == 0

    def test_level_zero_writes_nothing(self, temp_state_dir, monkeypatch):
        monkeypatch.setenv("IDEAS_DEBUG", "0")
        reset_logger()
        get_logger().error("somewhere", "boom")
        assert read_events(temp_state_dir) == []


class TestEvents:
    def test_command_event(self, temp_state_dir):
        get_logger().command("projects", 0, 12.34)
        (event,) = read_events(temp_state_dir)
        assert event["event"] == "command"
        assert event["command"] == "projects"
        assert event["exit_code"] == 0
        assert event["duration_ms"] == 12.3
        assert "timestamp" in event
        assert "pid" in event

    def test_debug_only_events_need_level_two(self, temp_state_dir, monkeypatch):
        get_logger().load_timing("ideas", 3, 1.0)
        get_logger().subprocess_error(["git", "status"], "not a repo", 128)
        assert read_events(temp_state_dir) == []

        monkeypatch.setenv("IDEAS_DEBUG", "2")
        reset_logger()
        get_logger().load_timing("ideas", 3, 1.0)
        get_logger().subprocess_error(["git", "status"], "not a repo", 128)
        events = read_events(temp_state_dir)
        assert [e["event"] for e in events] == ["load_timing", "subprocess_error"]
        assert events[1]["argv"] == ["git", "status"]
        assert events[1]["returncode"] == 128

    def test_long_messages_are_truncated(self, temp_state_dir):
        get_logger().error("where", "x" * 2000)
        (event,) = read_events(temp_state_dir)
        assert len(event["message"]) == 500

    def test_task_finished_failure_is_error_level(self, temp_state_dir):
        get_logger().task_finished("projects", "analyze_project", False, "Analysis failed", 5.0)
        (event,) = read_events(temp_state_dir)
        assert event["level"] == "error"
        assert event["success"] is False

    def test_unwritable_log_does_not_raise(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        logger = DebugLogger(log_path=blocker / "debug.log")
        logger.error("where", "still fine")


class TestSingleton:
    def test_get_logger_is_cached(self):
        assert get_logger() is get_logger()

    def test_reset_logger_creates_new_instance(self):
        first = get_logger()
        reset_logger()
        assert get_logger() is not first
