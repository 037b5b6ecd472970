import logging
import os
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from typing import Optional

from dotenv import load_dotenv
from flask_sqlalchemy import SQLAlchemy

load_dotenv()

db = SQLAlchemy()

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    secret_key: str
    log_level: str
    log_file: Optional[str]
    record_failures: bool
    low_stock_threshold: int

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL"),
            secret_key=os.getenv("SECRET_KEY", "dev_secret"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE") or None,
            record_failures=_env_flag("ACTION_RECORD_FAILURES", True),
            low_stock_threshold=int(os.getenv("LOW_STOCK_THRESHOLD", "10")),
        )

    def to_flask_config(self) -> dict:
        return {
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "SECRET_KEY": self.secret_key,
            "LOG_LEVEL": self.log_level,
            "LOG_FILE": self.log_file,
            "ACTION_RECORD_FAILURES": self.record_failures,
            "LOW_STOCK_THRESHOLD": self.low_stock_threshold,
        }


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Attach stderr (and optionally rotating file) handlers to the root logger.

    Safe to call more than once: handlers are only added on the first call.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if getattr(configure_logging, "_done", False):
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=1_000_000,
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as exc:
            print(
                f"Warning: unable to initialize log file at '{log_file}': {exc}",
                file=sys.stderr,
            )

    configure_logging._done = True
