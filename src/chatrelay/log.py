import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route all loggers, uvicorn's included, through one root stream handler."""
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
