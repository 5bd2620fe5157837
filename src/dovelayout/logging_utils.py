import logging
import sys
from typing import IO, Optional, Tuple

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class DedupStreamHandler(logging.StreamHandler):
    """
    Fold runs of identical records into one line.

    Repeats print a dot on the open line; the next distinct record (or
    close()) ends the line with "(xN)". Recomputing on every keystroke
    would otherwise repeat the same warning for each edit.
    """

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        super().__init__(stream)
        self._open_key: Optional[Tuple[int, str, str]] = None
        self._count = 0

    def emit(self, record: logging.LogRecord) -> None:
        try:
            key = (record.levelno, record.name, record.getMessage())
            if key == self._open_key:
                self._count += 1
                self.stream.write(".")
                self.flush()
                return

            self._end_line()
            self.stream.write(self.format(record))
            self._open_key = key
            self._count = 1
            self.flush()
        except Exception:
            self.handleError(record)

    def _end_line(self) -> None:
        if self._open_key is None:
            return
        if getattr(self.stream, "closed", False):
            self._open_key = None
            self._count = 0
            return
        if self._count > 1:
            self.stream.write(f" (x{self._count})")
        self.stream.write(self.terminator)
        self.flush()
        self._open_key = None
        self._count = 0

    def close(self) -> None:
        try:
            self._end_line()
        finally:
            super().close()


def setup_logging(level: str = "INFO", stream: Optional[IO[str]] = None) -> None:
    """
    Install a DedupStreamHandler on the root logger.

    Args:
        level: Level name such as "DEBUG"; unknown names fall back to INFO.
        stream: Output stream; defaults to stderr so reports on stdout stay clean.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    handler = DedupStreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=log_level, handlers=[handler], force=True)
