# supportdesk/core/log_config.py
import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"


def setup_logging(level: str = "INFO"):
    """Configure the root logger once for the API process and the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Request lines from the API client are too chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
