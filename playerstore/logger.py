import functools
import gzip
import inspect
import logging
import logging.handlers
import os
import shutil
import sys
from pathlib import Path
from typing import Callable

from .config import settings

logger = logging.getLogger("playerstore")
logger.setLevel(logging.DEBUG)
formatter = logging.Formatter(
    "%(asctime)s %(levelname)s [%(module)s:%(funcName)s:%(lineno)d] %(message)s"
)

logs_dir = Path(settings.logs_dir)
logs_dir.mkdir(parents=True, exist_ok=True)


def rotator(source: str, dest: str) -> None:
    """Compress a rotated log file and drop the uncompressed copy."""
    with open(source, "rb") as f_in, gzip.open(dest + ".gz", "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)
    os.remove(source)


log_file_handler = logging.handlers.TimedRotatingFileHandler(
    logs_dir / "playerstore.log", when="midnight"
)
log_file_handler.setFormatter(formatter)
log_file_handler.rotator = rotator
logger.addHandler(log_file_handler)

log_stream_handler = logging.StreamHandler(sys.stdout)
log_stream_handler.setFormatter(formatter)
logger.addHandler(log_stream_handler)


def log_exception[**P, R](
    prefix: str = "",
    default_return: R | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to wrap a function with try-except and log exceptions.

    Args:
        prefix: Optional prefix, may use {param} or {param.attr}
        default_return: Returned when an exception is caught

    Usage:
        @log_exception("Login of {event.player_name}")
        async def on_login(self, event):
            ...
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        sig = inspect.signature(func)
        func_name = func.__qualname__

        def describe_call(args: tuple, kwargs: dict) -> tuple[dict, str]:
            try:
                bound = sig.bind(*args, **kwargs)
                bound.apply_defaults()
            except TypeError as e:
                logger.warning(
                    f"Failed to bind arguments for function {func_name}: {e}",
                    stacklevel=4,
                )
                return {}, f"[args={args!r}, kwargs={kwargs!r}] "
            params = ", ".join(f"{k}={v!r}" for k, v in bound.arguments.items())
            return bound.arguments, f"[{params}] " if params else ""

        def render_prefix(bound_args: dict) -> str:
            if not prefix:
                return ""
            if "{" not in prefix or "}" not in prefix:
                return f"{prefix}: "
            try:
                return f"{prefix.format_map(bound_args)}: "
            except (AttributeError, KeyError, IndexError, ValueError) as e:
                logger.warning(
                    f"Failed to format prefix '{prefix}' with arguments: {e}",
                    stacklevel=4,
                )
                return f"{prefix}: "

        def report(e: Exception, args: tuple, kwargs: dict) -> None:
            bound_args, args_str = describe_call(args, kwargs)
            logger.error(
                f"{args_str}{render_prefix(bound_args)}{type(e).__name__}: {e}",
                exc_info=True,
                stacklevel=3,
            )

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    report(e, args, kwargs)
                    return default_return  # type: ignore[return-value]

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                report(e, args, kwargs)
                return default_return  # type: ignore[return-value]

        return sync_wrapper

    return decorator
