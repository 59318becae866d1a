"""Structural validation for content bundles.

Every check here is a predicate: it takes any parsed JSON value and returns
True or False, never raising. Entity checks are composed from a handful of
primitives (``is_string``, ``optional``, ``array_of``, ``record``) so that the
store, the save endpoint and the client cache all share one definition of a
valid bundle.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import ContentValidationError


logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]


def _guarded(check: Predicate) -> Predicate:
    def guarded(value: Any) -> bool:
        try:
            return bool(check(value))
        except Exception as e:
            # Anything odd enough to break a check (recursion, hostile __eq__) is invalid.
            logger.debug(f"Validator {getattr(check, '__name__', check)} rejected value: {e}")
            return False

    guarded.__name__ = getattr(check, "__name__", "guarded")
    return guarded


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_identifier(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def optional(check: Predicate) -> Predicate:
    """Accept ``None`` as well as anything ``check`` accepts."""

    def optional_check(value: Any) -> bool:
        return value is None or check(value)

    optional_check.__name__ = f"optional_{getattr(check, '__name__', 'check')}"
    optional_check.is_optional = True
    return optional_check


def array_of(check: Predicate, *, unique_key: Optional[str] = None) -> Predicate:
    """Accept a list whose every element passes ``check``.

    With ``unique_key`` set, elements must also carry distinct values under
    that key.
    """

    def array_check(value: Any) -> bool:
        if not isinstance(value, list):
            return False
        seen = set()
        for item in value:
            if not check(item):
                return False
            if unique_key is not None:
                key = item.get(unique_key)
                if key in seen:
                    return False
                seen.add(key)
        return True

    array_check.__name__ = f"array_of_{getattr(check, '__name__', 'check')}"
    return _guarded(array_check)


def record(name: str, /, **fields: Predicate) -> Predicate:
    """Build a predicate for an object with the given field checks.

    A field wrapped in ``optional`` may be missing or null. Extra fields are
    ignored.
    """

    def record_check(value: Any) -> bool:
        if not is_record(value):
            return False
        for field_name, check in fields.items():
            if field_name not in value:
                if getattr(check, "is_optional", False):
                    continue
                return False
            if not check(value[field_name]):
                return False
        return True

    record_check.__name__ = name
    return _guarded(record_check)


is_track = record(
    "is_track",
    title=is_string,
    lyrics=is_string,
    story=is_string,
    audioUrl=is_string,
)

is_album = record(
    "is_album",
    id=is_identifier,
    title=is_string,
    year=is_string,
    concept=is_string,
    context=optional(is_string),
    coverUrl=is_string,
    tracks=array_of(is_track),
    isUpcoming=optional(is_boolean),
)

is_fragment = record(
    "is_fragment",
    id=is_identifier,
    text=is_string,
    source=optional(is_string),
)

is_visual = record(
    "is_visual",
    id=is_identifier,
    url=is_string,
    title=is_string,
    description=is_string,
)

is_fiction_declaration = record(
    "is_fiction_declaration",
    main=is_string,
    details=is_string,
    tagline=optional(is_string),
)

is_ai_declaration = record(
    "is_ai_declaration",
    main=is_string,
    body=array_of(is_string),
    tagline=optional(is_string),
)

is_human_identity = record(
    "is_human_identity",
    footerQuote=is_string,
    originLabel=is_string,
    veritasName=is_string,
    veritasLink=is_string,
)

is_legal_section = record(
    "is_legal_section",
    id=is_identifier,
    title=is_string,
    body=is_string,
    list=optional(array_of(is_string)),
)

is_legal_content = record(
    "is_legal_content",
    heading=is_string,
    footer=is_string,
    sections=array_of(is_legal_section, unique_key="id"),
)

is_gallery_item = record(
    "is_gallery_item",
    id=is_identifier,
    title=is_string,
    manifesto=is_string,
)

is_home_content = record(
    "is_home_content",
    galleryMessage=is_string,
    galleryItems=array_of(is_gallery_item, unique_key="id"),
)

is_umami_settings = record(
    "is_umami_settings",
    enabled=is_boolean,
    websiteId=is_string,
    srcUrl=is_string,
    domains=optional(is_string),
)

is_google_analytics_settings = record(
    "is_google_analytics_settings",
    enabled=is_boolean,
    measurementId=is_string,
)

is_analytics_content = record(
    "is_analytics_content",
    umami=is_umami_settings,
    googleAnalytics=is_google_analytics_settings,
)

is_album_list = array_of(is_album, unique_key="id")
is_fragment_list = array_of(is_fragment, unique_key="id")
is_visual_list = array_of(is_visual, unique_key="id")


# (bundle key, predicate, required in every saved bundle)
BUNDLE_SECTIONS: Tuple[Tuple[str, Predicate, bool], ...] = (
    ("albums", is_album_list, True),
    ("fragments", is_fragment_list, True),
    ("visuals", is_visual_list, True),
    ("humanManifesto", is_string, False),
    ("humanIdentity", is_human_identity, False),
    ("fictionDec", is_fiction_declaration, False),
    ("aiDec", is_ai_declaration, False),
    ("legalContent", is_legal_content, False),
    ("homeContent", is_home_content, False),
    ("analyticsContent", is_analytics_content, False),
)

BUNDLE_FIELDS: Tuple[str, ...] = tuple(key for key, _, _ in BUNDLE_SECTIONS)

FIELD_VALIDATORS: Dict[str, Predicate] = {key: check for key, check, _ in BUNDLE_SECTIONS}


@dataclass
class ValidationResult:
    ok: bool
    errors: List[str] = field(default_factory=list)


def is_valid_field(key: str, value: Any) -> bool:
    """Check a single bundle field; unknown keys are never valid."""
    check = FIELD_VALIDATORS.get(key)
    if check is None:
        return False
    return _guarded(check)(value)


def validate_bundle(data: Any) -> ValidationResult:
    """Validate a whole bundle and name every section that failed.

    The collection sections must be present. The remaining sections may be
    absent or null, but when given they must be well formed.
    """
    if not is_record(data):
        return ValidationResult(ok=False, errors=["Payload must be an object."])

    errors: List[str] = []
    for key, check, required in BUNDLE_SECTIONS:
        value = data.get(key)
        if value is None and not required:
            continue
        if not _guarded(check)(value):
            errors.append(f"Invalid {key} payload.")

    return ValidationResult(ok=not errors, errors=errors)


def ensure_valid_bundle(data: Any) -> Dict[str, Any]:
    """Return ``data`` unchanged, or raise ContentValidationError listing what failed."""
    result = validate_bundle(data)
    if not result.ok:
        raise ContentValidationError(result.errors)
    return data
