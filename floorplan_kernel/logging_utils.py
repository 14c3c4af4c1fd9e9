from __future__ import annotations

import dataclasses
import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, MutableMapping, Optional, Sequence, Set, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 120
_repr.maxstring = 80

_MAX_ITEMS = 4


def _summarize_collection(value: Sequence[Any]) -> str:
    count = len(value)
    if count == 0:
        return f"{type(value).__name__}()"
    kinds = {type(item).__name__ for item in value}
    if all(dataclasses.is_dataclass(item) for item in value):
        # Vertex/Segment/element lists are summarized by size and leading ids.
        ids = [str(getattr(item, "id", "?")) for item in list(value)[:_MAX_ITEMS]]
        more = ", ..." if count > _MAX_ITEMS else ""
        return f"{count} x {'/'.join(sorted(kinds))}[{', '.join(ids)}{more}]"
    items = [_summarize(item) for item in list(value)[:_MAX_ITEMS]]
    if count > _MAX_ITEMS:
        items.append(f"... +{count - _MAX_ITEMS}")
    return f"{type(value).__name__}[{', '.join(items)}]"


def _summarize(value: Any) -> str:
    if isinstance(value, np.ndarray):
        return f"ndarray(shape={tuple(value.shape)}, dtype={value.dtype})"
    if isinstance(value, dict):
        head = list(value.items())[:_MAX_ITEMS]
        body = ", ".join(f"{_repr.repr(key)}: {_summarize(val)}" for key, val in head)
        if len(value) > _MAX_ITEMS:
            body += f", ... +{len(value) - _MAX_ITEMS}"
        return "{" + body + "}"
    if isinstance(value, (list, set, frozenset)) or (
        isinstance(value, tuple) and not _is_point(value)
    ):
        return _summarize_collection(list(value) if isinstance(value, (set, frozenset)) else value)
    return _repr.repr(value)


def _is_point(value: tuple) -> bool:
    return len(value) == 2 and all(isinstance(v, (int, float)) for v in value)


def _format_call(args: Sequence[Any], kwargs: MutableMapping[str, Any]) -> str:
    parts = [_summarize(arg) for arg in args]
    parts.extend(f"{key}={_summarize(val)}" for key, val in kwargs.items())
    return ", ".join(parts) if parts else "no-args"


def debug_log_call(
    logger: logging.Logger, *, name: Optional[str] = None, log_result: bool = True
) -> Callable[[F], F]:
    """Wrap a callable so each call emits DEBUG entry/exit records on ``logger``."""

    def decorator(func: F) -> F:
        if getattr(func, "_debug_logging_wrapped", False):
            return func

        qualname = name or getattr(func, "__qualname__", func.__name__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            logger.debug("-> %s(%s)", qualname, _format_call(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                logger.debug("!! %s raised %s: %s", qualname, type(exc).__name__, exc)
                raise
            if log_result:
                logger.debug("<- %s = %s", qualname, _summarize(result))
            else:
                logger.debug("<- %s", qualname)
            return result

        setattr(wrapper, "_debug_logging_wrapped", True)
        return cast(F, wrapper)

    return decorator


def _wrap_methods(cls: type, logger: logging.Logger, skip: Set[str]) -> None:
    for attr_name, attr_value in list(cls.__dict__.items()):
        if attr_name.startswith("_"):
            continue
        qualified = f"{cls.__name__}.{attr_name}"
        if attr_name in skip or qualified in skip:
            continue
        if isinstance(attr_value, staticmethod):
            wrapped = debug_log_call(logger, name=qualified)(attr_value.__func__)
            setattr(cls, attr_name, staticmethod(wrapped))
        elif inspect.isfunction(attr_value):
            setattr(cls, attr_name, debug_log_call(logger, name=qualified)(attr_value))


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
    wrap_methods: bool = True,
) -> None:
    """Wrap the public functions (and class methods) defined in ``namespace``."""

    module_name = namespace.get("__name__")
    logger = logger or logging.getLogger(str(module_name))
    skip_set: Set[str] = set(skip or ())

    for name, value in list(namespace.items()):
        if name.startswith("_") or name in skip_set:
            continue
        if getattr(value, "__module__", None) != module_name:
            continue
        if inspect.isfunction(value):
            namespace[name] = debug_log_call(logger, name=name)(value)
        elif wrap_methods and inspect.isclass(value) and not dataclasses.is_dataclass(value):
            _wrap_methods(value, logger, skip_set)
