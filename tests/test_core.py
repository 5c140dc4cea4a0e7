"""
Tests for the core modules: audit logger, configuration and results.
"""

import errno
import json
import os
import shutil
import tempfile
from pathlib import Path

import pytest

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import ExplorerConfig
from core.logger import AuditLogger, AuditEntry, ActionType, ActionStatus
from core.results import OperationResult, ErrorKind, classify_os_error, describe_os_error


class TestAuditLogger:
    """Test AuditLogger class."""

    @pytest.fixture
    def temp_log(self):
        """Create a temporary log file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.jsonl', delete=False) as f:
            yield f.name
        os.unlink(f.name)

    @pytest.fixture
    def logger(self, temp_log):
        """Create a logger with temp file."""
        return AuditLogger(log_path=temp_log)

    def test_log_action(self, logger):
        """Test logging an action."""
        entry = logger.log_action(
            action_type=ActionType.CREATE,
            description="Create file: /tmp/x",
            target="/tmp/x",
            status=ActionStatus.SUCCEEDED
        )

        assert entry.action_description == "Create file: /tmp/x"
        assert entry.status == "succeeded"
        assert entry.action_type == "create"

    def test_entries_written_as_jsonl(self, logger, temp_log):
        logger.log_action(ActionType.DELETE, "Delete file: a", target="a")
        logger.log_action(ActionType.COPY, "Copy a to b", target="b")

        with open(temp_log, encoding="utf-8") as f:
            lines = [json.loads(line) for line in f if line.strip()]

        assert [line["action_type"] for line in lines] == ["delete", "copy"]

    def test_get_recent(self, logger):
        """Test getting recent entries."""
        for i in range(5):
            logger.log_action(
                action_type=ActionType.LIST,
                description=f"Action {i}"
            )

        entries = logger.get_recent(limit=3)

        assert len(entries) == 3
        assert entries[0].action_description == "Action 4"

    def test_get_failed(self, logger):
        """Test getting failed actions."""
        logger.log_action(
            action_type=ActionType.CHMOD,
            description="Change permissions",
            status=ActionStatus.FAILED,
            result="Invalid mode"
        )
        logger.log_action(action_type=ActionType.LIST, description="List directory")

        failed = logger.get_failed()

        assert len(failed) == 1
        assert failed[0].result == "Invalid mode"

    def test_get_by_action_type(self, logger):
        logger.log_action(ActionType.MOVE, "Move a to b")
        logger.log_action(ActionType.SEARCH, "Search")
        logger.log_action(ActionType.MOVE, "Move b to c")

        moves = logger.get_by_action_type(ActionType.MOVE)

        assert [e.action_description for e in moves] == ["Move a to b", "Move b to c"]

    def test_corrupt_lines_skipped(self, logger, temp_log):
        logger.log_action(ActionType.LIST, "ok")
        with open(temp_log, "a", encoding="utf-8") as f:
            f.write("not json\n")

        assert len(AuditLogger(log_path=temp_log).get_recent()) == 1

    def test_export_csv(self, logger):
        logger.log_action(ActionType.CREATE, "Create file: a", target="a")

        exported = logger.export("csv")

        assert exported.splitlines()[0] == "timestamp,action_type,action_description,target,status,result"
        assert '"create"' in exported

    def test_export_unknown_format(self, logger):
        with pytest.raises(ValueError):
            logger.export("xml")

    def test_clear_requires_confirmation(self, logger):
        logger.log_action(ActionType.LIST, "List")

        assert not logger.clear()
        assert len(logger.get_recent()) == 1

    def test_clear_backs_up(self, tmp_path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path=str(log_path))
        logger.log_action(ActionType.LIST, "List")

        assert logger.clear(confirm=True)
        assert logger.get_recent() == []
        assert len(list(tmp_path.glob("audit.backup.*.jsonl"))) == 1

    def test_unwritable_log_keeps_entries(self, tmp_path):
        """A log path that can't be appended to doesn't raise."""
        log_path = tmp_path / "audit.jsonl"
        log_path.mkdir()
        logger = AuditLogger(log_path=str(log_path))

        entry = logger.log_action(ActionType.CREATE, "Create file: a", target="a")

        assert logger.write_error is not None
        assert "audit.jsonl" in logger.write_error
        assert not logger.writes_to_file
        assert logger.get_recent() == [entry]

    def test_uncreatable_log_directory(self, tmp_path):
        """A parent that is a regular file disables the file, not the logger."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        logger = AuditLogger(log_path=str(blocker / "logs" / "audit.jsonl"))

        logger.log_action(ActionType.LIST, "List directory")

        assert logger.write_error is not None
        assert len(logger.get_recent()) == 1

    def test_in_memory_logger_writes_nothing(self, tmp_path, monkeypatch):
        """Without a log path entries stay in the session only."""
        monkeypatch.chdir(tmp_path)
        logger = AuditLogger()
        logger.log_action(ActionType.CREATE, "Create file: a")

        assert len(logger.get_recent()) == 1
        assert list(tmp_path.iterdir()) == []

    def test_entry_round_trip(self):
        entry = AuditEntry.create(ActionType.NAVIGATE, "Change directory: /", target="/")

        assert AuditEntry.from_json(entry.to_json()) == entry


class TestExplorerConfig:
    """Test configuration loading."""

    def test_defaults_when_missing(self, tmp_path):
        config = ExplorerConfig.load(str(tmp_path / "missing.yaml"))

        assert config.color is True
        assert config.show_pseudo_entries is True
        assert config.audit_log is None

    def test_nested_under_explorer_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("""explorer:
  color: false
  show_pseudo_entries: false
  audit_log: data/audit.jsonl
""")

        config = ExplorerConfig.load(str(path))

        assert config.color is False
        assert config.show_pseudo_entries is False
        assert config.audit_log == "data/audit.jsonl"

    def test_top_level_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("color: false\n")

        config = ExplorerConfig.load(str(path))

        assert config.color is False
        assert config.show_pseudo_entries is True

    def test_invalid_yaml_falls_back(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("explorer: [unclosed\n")

        assert ExplorerConfig.load(str(path)) == ExplorerConfig()

    def test_non_boolean_flags_use_defaults(self, tmp_path):
        """Quoted "false" is a string, not a boolean."""
        path = tmp_path / "config.yaml"
        path.write_text("explorer:\n  color: \"false\"\n  show_pseudo_entries: 0\n")

        config = ExplorerConfig.load(str(path))

        assert config.color is True
        assert config.show_pseudo_entries is True

    def test_non_mapping_falls_back(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        assert ExplorerConfig.load(str(path)) == ExplorerConfig()


class TestResults:
    """Test OperationResult and error classification."""

    def test_constructors(self):
        ok = OperationResult.ok("done", data=[1])
        failed = OperationResult.fail(ErrorKind.NOT_FOUND, "missing")

        assert ok.success and ok.kind is None and ok.data == [1]
        assert not failed.success and failed.kind == ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("code, kind", [
        (errno.ENOENT, ErrorKind.NOT_FOUND),
        (errno.EACCES, ErrorKind.PERMISSION_DENIED),
        (errno.EPERM, ErrorKind.PERMISSION_DENIED),
        (errno.ENOTEMPTY, ErrorKind.NOT_EMPTY),
        (errno.EXDEV, ErrorKind.CROSS_DEVICE),
        (errno.EIO, ErrorKind.OTHER),
    ])
    def test_classify_errno(self, code, kind):
        assert classify_os_error(OSError(code, os.strerror(code))) == kind

    def test_eexist_depends_on_operation(self):
        error = OSError(errno.EEXIST, "File exists")

        assert classify_os_error(error) == ErrorKind.ALREADY_EXISTS
        assert classify_os_error(error, removing_dir=True) == ErrorKind.NOT_EMPTY

    def test_shutil_errors(self):
        assert classify_os_error(shutil.SameFileError("same")) == ErrorKind.INVALID_ARGUMENT
        assert classify_os_error(shutil.Error([])) == ErrorKind.OTHER

    def test_describe(self):
        assert describe_os_error(OSError(errno.ENOENT, "No such file or directory", "x")) == "No such file or directory"
        assert describe_os_error(ValueError("bad")) == "bad"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
