import json
import logging
import sys

import pytest

from starsearch.utils.logging import JsonFormatter, build_formatter, setup_logging


def _record(msg: str = "Track cache replaced", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord("starsearch.services.store", logging.INFO, __file__, 1, msg, None, exc_info)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJsonFormatter:
    def test_merges_extra_fields(self):
        record = _record()
        record.tracks = 3
        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == "Track cache replaced"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "starsearch.services.store"
        assert entry["tracks"] == 3

    def test_standard_attributes_left_out(self):
        entry = json.loads(JsonFormatter().format(_record()))
        assert "lineno" not in entry
        assert "args" not in entry

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record("Track cache replace failed", exc_info=sys.exc_info())

        entry = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in "".join(entry["exception"])


class TestBuildFormatter:
    def test_production_is_json(self):
        assert isinstance(build_formatter("production"), JsonFormatter)

    @pytest.mark.parametrize("env", ["development", "test"])
    def test_other_envs_are_plain_text(self, env):
        formatter = build_formatter(env)
        assert not isinstance(formatter, JsonFormatter)

        line = formatter.format(_record())
        assert "[INFO] starsearch.services.store: Track cache replaced" in line


class TestSetupLogging:
    def test_installs_single_plain_handler(self, restore_root_logger):
        setup_logging("debug", env="development")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert not isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("sqlalchemy").level == logging.WARNING

    def test_production_installs_json_handler(self, restore_root_logger):
        setup_logging(env="production")
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
