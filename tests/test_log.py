import logging
import logging.handlers

from iscctl.common.log import configure_logging


def test_configure_logging_with_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = tmp_path / "logs" / "iscctl.log"
        configure_logging("debug", log_file=log_file)
        assert root.level == logging.DEBUG
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
        logging.getLogger("iscctl.test").debug("TX %r", "$FCG,1")
        for h in root.handlers:
            h.flush()
        assert "$FCG,1" in log_file.read_text(encoding="utf-8")

        configure_logging("info")
        assert root.level == logging.INFO
        assert not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
