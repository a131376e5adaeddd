"""Decorator form of ``grid_operation`` for cell constructors."""

import functools
import inspect
import logging
from typing import Any, Callable, Optional, TypeVar

from .context import grid_operation
from .structured_logger import get_logger

F = TypeVar('F', bound=Callable[..., Any])

_ZOOM_ARGUMENTS = ('zoom_level', 'zoom')


def _describe(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return f"<{type(value).__name__}>"


def log_operation(operation_name: Optional[str] = None,
                  source: Optional[str] = None,
                  log_args: bool = False,
                  level: int = logging.DEBUG):
    """
    Run the decorated call inside ``grid_operation``.

    The zoom is taken from a ``zoom_level`` or ``zoom`` argument. A result
    with a length is reported as ``cells_generated``. Nothing is done when the
    logger is disabled for ``level``; errors always propagate unlogged.

    Args:
        operation_name: Operation name (defaults to the function name)
        source: Geometry source tag for the records
        log_args: Log a record with the scalar arguments before the call
        level: Level of the emitted records

    Example:
        @classmethod
        @log_operation('cells_from_line', source='line')
        def from_line_string(cls, line, zoom, ...):
            ...
    """
    def decorator(func: F) -> F:
        name = operation_name or func.__name__
        signature = inspect.signature(func)
        logger = get_logger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not logger.isEnabledFor(level):
                return func(*args, **kwargs)

            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            arguments = bound.arguments
            zoom = next((arguments[key] for key in _ZOOM_ARGUMENTS if key in arguments), None)

            if log_args:
                shown = {key: _describe(value) for key, value in arguments.items()
                         if key not in ('self', 'cls')}
                logger.log(level, "Calling %s", name, extra={'context': {'arguments': shown}})

            with grid_operation(name, zoom=zoom, source=source, level=level) as metrics:
                result = func(*args, **kwargs)
                if hasattr(result, '__len__'):
                    metrics['cells_generated'] = len(result)
            return result

        return wrapper  # type: ignore
    return decorator
