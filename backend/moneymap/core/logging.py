import logging
import sys


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging to output to stdout with proper formatting."""
    root_logger = logging.getLogger()
    if any(getattr(h, "_moneymap", False) for h in root_logger.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    handler._moneymap = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Set lower log levels for some noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
