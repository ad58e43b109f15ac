import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger."""
    root = logging.getLogger()
    if any(getattr(h, "_uniyelp", False) for h in root.handlers):
        root.setLevel(level.upper())
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._uniyelp = True
    root.addHandler(handler)
    root.setLevel(level.upper())
