"""
Shared Utilities

Sections:
- Logging setup
- Stage tracing and timing
"""

import functools
import logging
import sys
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# =============================================================================
# Logging
# =============================================================================

def setup_logging(
    verbose: bool,
    tile_id: Optional[str] = None,
    enable_file_logging: bool = False,
    logs_dir: Path = Path("logs")
) -> Optional[Path]:
    """
    Configure logging with optional timestamped file output.

    Args:
        verbose: Enable debug-level logging if True
        tile_id: Tile identifier for log file naming
        enable_file_logging: Create timestamped log files when True
        logs_dir: Directory receiving log files

    Returns:
        Path of the log file when file logging is enabled, else None
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = None

    if enable_file_logging:
        logs_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = logs_dir / f"tile_{tile_id or 'unknown'}_{timestamp}.log"

        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        print(f"Logging to: {log_file}")

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True
    )
    return log_file


# =============================================================================
# Tracing
# =============================================================================

@contextmanager
def stage(name: str) -> Generator[None, None, None]:
    """
    Trace a pipeline stage boundary.

    Logs the stage start and its duration on success. Failures are logged at
    debug level and re-raised unchanged.
    """
    logger.info(f"Stage '{name}' started")
    start_time = time.perf_counter()
    try:
        yield
    except Exception as e:
        logger.debug(f"Stage '{name}' failed after {time.perf_counter() - start_time:.3f}s: {type(e).__name__}")
        raise
    logger.info(f"Stage '{name}' completed in {time.perf_counter() - start_time:.3f}s")


def timer(func: Callable) -> Callable:
    """Decorator to time function execution."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        end_time = time.time()
        logger.debug(f"{func.__name__} completed in {end_time - start_time:.2f} seconds")
        return result
    return wrapper
