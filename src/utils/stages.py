"""
Stage execution helpers: per-stage timeout and error tagging for provider calls.

Every provider round-trip goes through run_stage so a hung provider fails the request
the same way an erroring one does. Nothing here retries.
"""

import asyncio
import functools
import time

from src.config.logging_config import setup_logger
from src.config.settings import config
from src.services.errors import PipelineError, StageTimeoutError

logger = setup_logger(__name__)


async def run_stage(stage: str, awaitable, timeout: float | None = None):
    """
    Await ``awaitable`` under the stage timeout.

    Timeouts become StageTimeoutError; PipelineErrors pass through untouched; any other
    exception is wrapped in a PipelineError naming ``stage``.
    """
    timeout = config.STAGE_TIMEOUT_SECONDS if timeout is None else timeout
    t0 = time.time()
    try:
        result = await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error("Stage %s timed out after %.0fs", stage, timeout)
        raise StageTimeoutError(stage, timeout) from e
    except PipelineError as e:
        logger.error("Stage %s failed: %s", stage, e)
        raise
    except Exception as e:
        logger.error("Stage %s failed: %s: %s", stage, type(e).__name__, e)
        raise PipelineError(stage, str(e)) from e
    logger.info("  %s: %.1fs", stage, time.time() - t0)
    return result


def run_blocking(fn, *args, **kwargs):
    """Run a blocking SDK call in the default thread pool; returns an awaitable future."""
    loop = asyncio.get_running_loop()
    return loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))
