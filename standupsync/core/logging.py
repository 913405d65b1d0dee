"""
Logging setup. stdout only: gunicorn and the hosting platform collect it.
"""
import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the `standupsync` logger tree."""
    root = logging.getLogger("standupsync")
    root.setLevel(level.upper())
    if not any(getattr(h, "_standupsync", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._standupsync = True  # type: ignore[attr-defined]
        root.addHandler(handler)
