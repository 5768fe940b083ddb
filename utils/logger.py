"""
Logger Configuration
Unified logging setup (Rich console output, optional log file)
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler
from rich.console import Console


# Shared stderr console so log lines never interleave with preview output
console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

LOG_DIR = Path(__file__).parent.parent / "logs"


def setup_logger(
    name: Optional[str] = None,
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    use_rich: bool = True,
    debug: bool = False,
) -> logging.Logger:
    """
    Configure a logger.
    
    Args:
        name: Logger name, None configures the root logger so every
            ``logging.getLogger(__name__)`` in the project inherits it
        level: Log level, defaults to DEBUG when ``debug`` is set else INFO
        log_file: Optional file name under ``logs/``
        use_rich: Render console output through Rich
        debug: Value of the DEBUG toggle
        
    Returns:
        The configured logger
    """
    if level is None:
        level = logging.DEBUG if debug else logging.INFO
    
    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    # Avoid stacking handlers on repeated setup
    if logger.handlers:
        return logger
    
    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=debug,
        )
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    
    console_handler.setLevel(level)
    logger.addHandler(console_handler)
    
    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_path = LOG_DIR / log_file
        
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    
    # Third-party clients are chatty at DEBUG
    for noisy in ("httpx", "httpcore", "asyncio"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))
    
    return logger
