from pathlib import Path

from loguru import logger

from logger.session_logger import SessionLogger


def test_session_log_has_start_and_end_markers(tmp_path):
    session = SessionLogger(str(tmp_path))
    session.log("grading started")
    session.log_end()

    text = Path(session.log_path).read_text(encoding="utf-8")
    assert Path(session.log_path).name.startswith("speak2sheet_session_")
    assert "=== SESSION START ===" in text
    assert "grading started" in text
    assert text.rstrip().endswith("=== SESSION END ===")


def test_session_log_mirrors_loguru(tmp_path):
    session = SessionLogger(str(tmp_path))
    logger.info("[sheet] row 3 col 7: '' -> '8.5'")
    logger.debug("below the file level")
    session.log_end()

    text = Path(session.log_path).read_text(encoding="utf-8")
    assert "row 3 col 7" in text
    assert "below the file level" not in text


def test_log_kv_writes_json(tmp_path):
    session = SessionLogger(str(tmp_path))
    session.log_kv("CONFIG", {"grade_column": "H", "language": "el"})
    session.log_end()

    text = Path(session.log_path).read_text(encoding="utf-8")
    assert '"grade_column": "H"' in text


def test_log_end_is_idempotent(tmp_path):
    session = SessionLogger(str(tmp_path))
    session.log_end()
    session.log_end()

    text = Path(session.log_path).read_text(encoding="utf-8")
    assert text.count("=== SESSION END ===") == 1
