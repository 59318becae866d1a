"""Startup resolution of the content bundle.

Each field is resolved on its own: the server's value when it validates,
else the locally cached value when it validates, else the compiled default.
Corrupt cache entries are deleted as they are found.
"""
import copy
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..core.validation import BUNDLE_FIELDS, is_valid_field
from ..defaults import DEFAULT_BUNDLE
from .cache import CACHE_KEYS, LocalCache


logger = logging.getLogger(__name__)


class Source(str, Enum):
    REMOTE = "remote"
    CACHE = "cache"
    DEFAULT = "default"


@dataclass
class Resolution:
    value: Any
    source: Source


@dataclass
class HydrationResult:
    bundle: Dict[str, Any]
    sources: Dict[str, Source] = field(default_factory=dict)


def resolve_field(
    key: str,
    remote: Optional[Mapping[str, Any]],
    cached: Mapping[str, Any],
    defaults: Mapping[str, Any],
) -> Resolution:
    if isinstance(remote, Mapping) and key in remote and is_valid_field(key, remote[key]):
        return Resolution(remote[key], Source.REMOTE)
    if key in cached and is_valid_field(key, cached[key]):
        return Resolution(cached[key], Source.CACHE)
    return Resolution(copy.deepcopy(defaults[key]), Source.DEFAULT)


def read_cached_fields(cache: LocalCache) -> Dict[str, Any]:
    """Load every valid cached field, purging entries that fail to parse or validate."""
    cached: Dict[str, Any] = {}
    for key in BUNDLE_FIELDS:
        cache_key = CACHE_KEYS[key]
        try:
            raw = cache.get_raw(cache_key)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read cache entry {cache_key}: {e}")
            continue
        if raw is None:
            continue

        try:
            value = json.loads(raw)
        except (ValueError, RecursionError):
            value = None
            valid = False
        else:
            valid = is_valid_field(key, value)

        if valid:
            cached[key] = value
            continue

        logger.warning(f"Discarding corrupt cache entry {cache_key}")
        try:
            cache.remove(cache_key)
        except OSError as e:
            logger.warning(f"Failed to purge cache entry {cache_key}: {e}")
    return cached


def hydrate(
    remote: Optional[Mapping[str, Any]],
    cache: LocalCache,
    defaults: Optional[Mapping[str, Any]] = None,
) -> HydrationResult:
    defaults = defaults if defaults is not None else DEFAULT_BUNDLE
    cached = read_cached_fields(cache)

    result = HydrationResult(bundle={})
    for key in BUNDLE_FIELDS:
        resolution = resolve_field(key, remote, cached, defaults)
        result.bundle[key] = resolution.value
        result.sources[key] = resolution.source

    logger.info(f"Hydrated content: {', '.join(f'{k}={s.value}' for k, s in result.sources.items())}")
    return result


def mirror_to_cache(bundle: Mapping[str, Any], cache: LocalCache) -> None:
    """Write every bundle field to its cache key."""
    for key in BUNDLE_FIELDS:
        if key in bundle and bundle[key] is not None:
            cache.set(CACHE_KEYS[key], bundle[key])
