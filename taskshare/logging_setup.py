import logging
import sys


_NOISY_LOGGERS = ("sqlalchemy.engine", "multipart", "python_multipart")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single stderr handler.

    Safe to call more than once: existing handlers are replaced so tests that
    build several apps do not get duplicated lines.
    """
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
