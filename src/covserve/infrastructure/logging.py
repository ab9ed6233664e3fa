import logging
from dataclasses import dataclass
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"


@dataclass(eq=False)
class TruncatingFileHandler(logging.FileHandler):
    """File handler that starts the file over once it grows past `max_bytes`."""

    filename: Path
    max_bytes: int
    mode: str = "a"
    encoding: str | None = "utf-8"
    delay: bool = False

    def __post_init__(self) -> None:
        self.filename.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(
            filename=self.filename,
            mode=self.mode,
            encoding=self.encoding,
            delay=self.delay,
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if self.stream and self.stream.tell() >= self.max_bytes:
                self.stream.seek(0)
                self.stream.truncate()
            super().emit(record)
        except Exception:
            self.handleError(record)


def create_logger(
    *,
    name: str,
    log_dir: Path,
    logfile_size_limit_mb: int,
    level: int = logging.INFO,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Operator output goes to the terminal separately; keep log records off it.
    logger.propagate = False

    if logger.handlers:
        return logger

    handler = TruncatingFileHandler(
        filename=Path(log_dir) / "covserve.log",
        max_bytes=logfile_size_limit_mb * 1024 * 1024,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    return logger
