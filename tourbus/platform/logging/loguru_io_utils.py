import time
from typing import Any, Callable

from tourbus.platform.logging.loguru_io_config import (
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


MAX_CONTENT_LENGTH = 500
MASK = '********'


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    return f'{func.__module__}:{func.__qualname__}'


def get_chain_start_time() -> str:
    # the outermost decorated call starts the chain clock
    if call_depth_var.get() <= 1 or not chain_start_time_var.get():
        chain_start_time_var.set(time.perf_counter())
        return 'chain: 0.000s'
    return f'chain: {time.perf_counter() - chain_start_time_var.get():.3f}s'


def reset_call_depth() -> None:
    call_depth_var.set(max(0, call_depth_var.get() - 1))


def should_mask_keyword(key: Any, value: Any) -> Any:
    if isinstance(key, str) and key.lower() in SENSITIVE_KEYWORDS:
        return MASK
    return value


def mask_sensitive(data: Any) -> Any:
    secret_value = getattr(data, 'get_secret_value', None)
    if callable(secret_value):
        return MASK
    return data


def truncate_content(data: Any) -> Any:
    if isinstance(data, str | bytes) and len(data) > MAX_CONTENT_LENGTH:
        return f'{data[:MAX_CONTENT_LENGTH]!r}... ({len(data)} chars)'
    if isinstance(data, list | tuple) and len(data) > 50:
        return f'{type(data).__name__}[{len(data)} items]'
    return data
