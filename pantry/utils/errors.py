"""Error taxonomy and graceful-degradation helpers.

Failures fall in two groups:
- Recoverable locally: translation provider errors and cache unavailability.
  These are logged and replaced by a default value (original text, cache miss).
- Surfaced to the caller: recipe provider errors and malformed provider payloads,
  for which no safe default exists.
"""

from typing import Any, Awaitable, Optional

from pantry.utils.logger import logger


class PantryError(Exception):
    """Base class for errors raised by the pantry core."""


class TranslationProviderError(PantryError):
    """The translation provider call failed or returned no usable text."""


class RecipeProviderError(PantryError):
    """The recipe provider answered with an error status or could not be reached.

    Attributes:
        status: HTTP status returned by the provider, or None for network failures.
        message: Provider-supplied error message when available.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(f"{message} (status={status})" if status is not None else message)
        self.status = status
        self.message = message


class RecipeStructureError(PantryError):
    """The recipe provider returned a payload missing required fields."""


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log error with appropriate level.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
    """
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro: Awaitable[Any],
    operation_name: str,
    log_level: str = "warning",
) -> Any:
    """Safely execute async operation with consistent error logging.

    Used for operations whose failure must not abort the caller:
    - Cache reads: an unavailable store is a cache miss
    - Cache writes: the computed value is still returned
    - Translation calls: the caller falls back to the original text

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Cache read").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".

    Returns:
        Result of coroutine if successful, None on exception.

    Example:
        cached = await safe_execute_async(cache.get(key), "Cache read")
        # Returns None (cache miss) if the store is unavailable
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return None
