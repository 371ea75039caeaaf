import logging

import pytest

from gm3d import Matrix4, Vector3, SingularMatrixError
from gm3d.logging_config import setup_logging


def test_zero_normalize_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="gm3d"):
        Vector3.zeros().normalize()
    assert any("normalize skipped" in r.getMessage() for r in caplog.records)


def test_singular_inverse_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="gm3d"):
        with pytest.raises(SingularMatrixError):
            Matrix4.zeros().inversed()
    assert any(r.name == "gm3d.matrix" for r in caplog.records)


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    log_file = tmp_path / "gm3d.log"
    logger = setup_logging(logging.DEBUG, str(log_file))
    logger = setup_logging(logging.DEBUG, str(log_file))
    try:
        assert logger.name == "gm3d"
        assert len(logger.handlers) == 2
        logging.getLogger("gm3d.geom").debug("hello from geom")
        for h in logger.handlers:
            h.flush()
        assert "hello from geom" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(logger.handlers):
            h.close()
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)


def test_setup_logging_closes_replaced_file_handler(tmp_path):
    first = setup_logging(logging.INFO, str(tmp_path / "first.log"))
    old_file = next(h for h in first.handlers if isinstance(h, logging.FileHandler))
    logger = setup_logging(logging.INFO, str(tmp_path / "second.log"))
    try:
        assert old_file not in logger.handlers
        assert old_file.stream is None
    finally:
        for h in list(logger.handlers):
            h.close()
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)
