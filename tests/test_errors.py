"""Tests for the error hierarchy, the error log and the operations log."""

import logging

import pytest

from hop.errors import (
    HopError,
    InvalidArguments,
    NameConflict,
    NotFound,
    PathInvalid,
    PersistenceFailure,
    StaleBookmark,
    log_exception,
)
from hop.logging_config import configure_ops_log


@pytest.mark.parametrize("cls", [
    InvalidArguments, NameConflict, NotFound, PathInvalid, PersistenceFailure, StaleBookmark,
])
def test_all_errors_are_hop_errors(cls):
    assert issubclass(cls, HopError)


def test_builtin_bases():
    assert issubclass(InvalidArguments, ValueError)
    assert issubclass(NotFound, LookupError)


def test_messages():
    assert str(NotFound("proj")) == "Bookmark 'proj' not found."
    assert str(NameConflict("proj")) == "Bookmark 'proj' already exists."
    assert str(NameConflict("proj", "Choose another.")).endswith("Choose another.")
    err = StaleBookmark("proj", "/gone")
    assert "'/gone'" in str(err) and err.path == "/gone"


class TestLogException:

    def test_writes_traceback(self, isolated_env):
        try:
            raise RuntimeError("kaboom")
        except RuntimeError as e:
            path = log_exception(e, context="hop CLI")

        assert path == isolated_env / "hop-errors.log"
        text = path.read_text()
        assert "hop CLI" in text
        assert "RuntimeError: kaboom" in text
        assert "Traceback" in text

    def test_appends(self, isolated_env):
        for i in range(2):
            try:
                raise ValueError(f"err{i}")
            except ValueError as e:
                path = log_exception(e)
        text = path.read_text()
        assert "err0" in text and "err1" in text

    def test_records_bookmark_file(self, isolated_env, bookmark_file):
        try:
            raise RuntimeError("kaboom")
        except RuntimeError as e:
            path = log_exception(e, context="hop to proj", bookmark_file=bookmark_file)

        text = path.read_text()
        assert "hop to proj" in text
        assert f"bookmarks: {bookmark_file}" in text

    def test_unwritable_log_is_ignored(self, isolated_env):
        isolated_env.parent.mkdir(parents=True, exist_ok=True)
        isolated_env.write_text("not a directory")
        path = log_exception(RuntimeError("kaboom"))
        assert path == isolated_env / "hop-errors.log"


class TestOpsLog:

    def test_info_records_reach_file(self, tmp_path):
        handler = configure_ops_log(tmp_path)
        try:
            logging.getLogger("hop.api").info("add %s", "proj")
            handler.flush()
            assert "add proj" in (tmp_path / "hop-ops.log").read_text()
        finally:
            logging.getLogger("hop").removeHandler(handler)
            handler.close()

    def test_not_added_twice(self, tmp_path):
        first = configure_ops_log(tmp_path)
        try:
            assert configure_ops_log(tmp_path) is first
        finally:
            logging.getLogger("hop").removeHandler(first)
            first.close()
