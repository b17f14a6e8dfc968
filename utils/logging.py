import logging
import sys
from typing import Optional


def _level(name: Optional[str], default: int) -> int:
    return getattr(logging, str(name).upper(), default) if name else default


def setup_logging(level: Optional[str] = "INFO", sql_level: Optional[str] = "WARNING") -> None:
    """
    Configure application-wide logging on stdout.
    `sql_level` controls the SQLAlchemy engine logger separately, INFO prints every statement.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(_level(level, logging.INFO))

    # Clear existing handlers to avoid duplicates in reloads
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(_level(sql_level, logging.WARNING))
