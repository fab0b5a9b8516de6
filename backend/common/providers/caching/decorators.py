import functools
import hashlib
import json
from typing import Callable, Optional, Type
from pydantic import BaseModel

from common.core.otel_axiom_exporter import get_logger
from .factory import get_cache_provider

logger = get_logger(__name__)


def _generate_cache_key(func: Callable, args: tuple, kwargs: dict) -> str:
    if args and hasattr(args[0], func.__name__):
        # Instance method - drop self from the key
        prefix = args[0].__class__.__name__
        key_args = args[1:]
    else:
        prefix = func.__module__.split(".")[-1]
        key_args = args

    if not key_args and not kwargs:
        return f"{prefix}:{func.__name__}"

    args_json = json.dumps(
        {"args": key_args, "kwargs": dict(sorted(kwargs.items()))},
        sort_keys=True,
        default=str,
    )
    return f"{prefix}:{func.__name__}:{hashlib.md5(args_json.encode()).hexdigest()[:8]}"


def _resolve_key(
    func: Callable, args: tuple, kwargs: dict, key_generator: Optional[Callable]
) -> Optional[str]:
    try:
        if key_generator is None:
            return _generate_cache_key(func, args, kwargs)
        if args and hasattr(args[0], func.__name__):
            return key_generator(*args[1:], **kwargs)
        return key_generator(*args, **kwargs)
    except Exception as e:
        logger.warning(f"Cache key generation failed for {func.__name__}: {e}")
        return None


def _decode(model_type: Type, cached_value):
    if isinstance(model_type, type) and issubclass(model_type, BaseModel):
        if isinstance(cached_value, list):
            return [model_type.model_validate(item) for item in cached_value]
        return model_type.model_validate(cached_value)
    return cached_value


def _encode(result):
    if isinstance(result, list):
        return [
            item.model_dump(mode="json") if isinstance(item, BaseModel) else item
            for item in result
        ]
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    return result


def cache(model_type: Type, ttl: int = 3600, key_generator: Optional[Callable] = None):
    """
    Cache decorator for async methods/functions.

    Cache failures never fail the call: a broken key, read or write falls
    back to executing the wrapped function. ``None`` results are not cached.

    Args:
        model_type: Pydantic model type used to rebuild cached values
        ttl: Time to live in seconds (default: 1 hour)
        key_generator: Optional custom key generator, called without ``self``
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            cache_key = _resolve_key(func, args, kwargs, key_generator)

            if cache_key:
                try:
                    cached_value = await get_cache_provider().get(cache_key)
                    if cached_value is not None:
                        logger.debug(f"Cache hit for key: {cache_key}")
                        return _decode(model_type, cached_value)
                except Exception as e:
                    logger.warning(f"Cache get failed for key {cache_key}: {e}")

            result = await func(*args, **kwargs)

            if cache_key and result is not None:
                try:
                    await get_cache_provider().set(cache_key, _encode(result), ttl)
                except Exception as e:
                    logger.warning(f"Cache set failed for key {cache_key}: {e}")

            return result

        return wrapper

    return decorator

