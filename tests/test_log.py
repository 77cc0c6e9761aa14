"""Tests for logger naming and per-component debug overrides."""

import logging

import peekbar.log as log_mod


class TestParseDebugComponents:
    def test_empty(self):
        assert log_mod.parse_debug_components(None) == frozenset()
        assert log_mod.parse_debug_components("") == frozenset()

    def test_comma_list_with_blanks(self):
        assert log_mod.parse_debug_components(" barrier, ,hot_edge ") == {
            "barrier",
            "hot_edge",
        }


class TestGetLogger:
    def test_namespaced(self):
        assert log_mod.get_logger("service").name == "peekbar.service"

    def test_listed_component_logs_debug(self, monkeypatch):
        # Given
        monkeypatch.setattr(log_mod, "DEBUG_COMPONENTS", frozenset({"test_barrier_dbg"}))
        # When
        logger = log_mod.get_logger("test_barrier_dbg")
        # Then
        assert logger.isEnabledFor(logging.DEBUG)

    def test_all_enables_every_component(self, monkeypatch):
        monkeypatch.setattr(log_mod, "DEBUG_COMPONENTS", frozenset({"all"}))
        assert log_mod.get_logger("test_any_dbg").level == logging.DEBUG

    def test_unlisted_component_keeps_default(self, monkeypatch):
        monkeypatch.setattr(log_mod, "DEBUG_COMPONENTS", frozenset({"barrier"}))
        assert log_mod.get_logger("test_enforcer_plain").level == logging.NOTSET
