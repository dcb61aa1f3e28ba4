import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

from orgsync.logging_handlers import DateStampedFileHandler, cleanup_old_logs


def test_date_stamped_file_handler_creates_expected_path(tmp_path) -> None:
    current = datetime(2024, 5, 26, 12, 34, 56, tzinfo=timezone.utc)
    handler = DateStampedFileHandler(tmp_path / "logs", current_time=current)
    try:
        expected_file = (
            tmp_path / "logs" / "2024-05-26" / "orgsync_2024-05-26_12-34-56_UTC.log"
        ).resolve()
        file_path = Path(handler.baseFilename)
        assert file_path == expected_file
        assert file_path.exists()

        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname=__file__,
            lineno=0,
            msg="hello world",
            args=(),
            exc_info=None,
        )
        handler.emit(record)

        assert "hello world" in file_path.read_text(encoding="utf-8")
    finally:
        handler.close()


def test_handler_converts_to_utc(tmp_path) -> None:
    eastern = timezone(timedelta(hours=-5))
    current = datetime(2023, 1, 1, 22, 4, 5, tzinfo=eastern)
    handler = DateStampedFileHandler(tmp_path, prefix="upload", current_time=current)
    try:
        assert Path(handler.baseFilename).name == "upload_2023-01-02_03-04-05_UTC.log"
        assert Path(handler.baseFilename).parent.name == "2023-01-02"
    finally:
        handler.close()


def test_cleanup_old_logs(tmp_path) -> None:
    """Old log files are deleted and their empty date folders removed."""
    now = datetime.now(timezone.utc)
    old_dir = tmp_path / "2020-01-01"
    new_dir = tmp_path / "today"
    old_dir.mkdir()
    new_dir.mkdir()

    old_file = old_dir / "orgsync_old.log"
    old_file.write_text("old content")
    old_time = (now - timedelta(days=3)).timestamp()
    os.utime(old_file, (old_time, old_time))

    recent_file = new_dir / "orgsync_recent.log"
    recent_file.write_text("recent content")

    other_file = new_dir / "notes.txt"
    other_file.write_text("not a log")
    os.utime(other_file, (old_time, old_time))

    deleted, errors = cleanup_old_logs(tmp_path, retention_hours=48)

    assert (deleted, errors) == (1, 0)
    assert not old_file.exists()
    assert not old_dir.exists()
    assert recent_file.exists()
    assert other_file.exists()


def test_cleanup_disabled_or_missing_directory(tmp_path) -> None:
    log_file = tmp_path / "x.log"
    log_file.write_text("keep")
    old_time = (datetime.now(timezone.utc) - timedelta(days=30)).timestamp()
    os.utime(log_file, (old_time, old_time))

    assert cleanup_old_logs(tmp_path, retention_hours=0) == (0, 0)
    assert log_file.exists()
    assert cleanup_old_logs(tmp_path / "missing", retention_hours=1) == (0, 0)
