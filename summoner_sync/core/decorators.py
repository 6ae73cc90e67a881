"""
Service layer decorators for common functionality.

This module provides decorators for structured logging around service
operations. Errors are logged with the bound call arguments and always
re-raised unchanged, so callers see the original taxonomy error.
"""

import functools
import inspect
import structlog
from typing import Any, Awaitable, Callable, Dict, ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from summoner_sync.core.exceptions import ServiceException

logger = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def _call_context(
    func: Callable[..., Any], service_name: str, args: tuple, kwargs: dict
) -> Dict[str, Any]:
    """Build log context from the bound arguments of a service call."""
    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()

    context: Dict[str, Any] = {
        "service": service_name,
        "operation": func.__name__,
    }
    for name, value in bound_args.arguments.items():
        if name in ("self", "db", "session", "uow"):
            continue
        # Limit values to avoid huge log entries
        context[name] = str(value)[:200] if value is not None else None
    return context


def service_error_handler(
    service_name: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator for logging service method calls and failures.

    :param service_name: Name of the service (e.g., "SummonerService")
    :returns: Decorated coroutine function

    :example:
        @service_error_handler("SummonerService")
        async def resolve_summoner(self, name: str) -> ResolvedSummoner:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            context = _call_context(func, service_name, args, kwargs)
            logger.debug("Service method called", **context)

            try:
                result = await func(*args, **kwargs)
            except ServiceException as e:
                logger.info(
                    "Service operation failed",
                    error_type=e.__class__.__name__,
                    error_message=e.message,
                    error_context=e.context,
                    **context,
                )
                raise
            except SQLAlchemyError as e:
                logger.error(
                    "Store error in service operation",
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                    **context,
                )
                raise

            logger.debug("Service method completed successfully", **context)
            return result

        return async_wrapper

    return decorator
