import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from rt.common.setup import PATHS

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attaches a handler under a stable name unless one by that name is already there, so calling get_logger again
# (tests, a second window) never doubles every line.
def _attach(logger: logging.Logger, handler_name: str, make_handler, level, fmt) -> None:
    if any(h.get_name() == handler_name for h in logger.handlers):
        return
    handler = make_handler()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)

def get_logger(
        name = "racetimer",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        persistent = True,
        console = False,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # History across race days: starts, pauses, resets and exports at `level` and up.
    if persistent:
        _attach(logger, f"{name}:persistent",
                lambda: RotatingFileHandler(log_dir / f"{name}.log", maxBytes=max_bytes, backupCount=backup_count,
                                            encoding="utf-8", delay=True),
                level, fmt)

    # This run only, every capture and bib edit included, for settling a disputed finish after the fact.
    _attach(logger, f"{name}:latest",
            lambda: logging.FileHandler(log_dir / "latest.log", mode="w", encoding="utf-8", delay=True),
            logging.DEBUG, fmt)

    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler, level, fmt)

    return logger

log = get_logger(level=logging.DEBUG)
log.info("=== INITIALIZED NEW SESSION ===")
