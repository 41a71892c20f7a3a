from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import fields, replace
from enum import Enum
from typing import Any

from backend.core.models import (
    BuildingHeight,
    ConstructionStatus,
    Facing,
    FilterSpecification,
    FloorBand,
    FurnishedStatus,
    ListedBy,
    ListingType,
    OwnershipType,
    ParkingType,
    PriceFilterMode,
    PropertyType,
    ViewType,
)
from backend.core.preferences import PreferenceStore


LOGGER = logging.getLogger(__name__)

SAVED_SEARCH_KEY = "saved_search"


class SavedSearchError(ValueError):
    """Saved search blob cannot be applied."""


def serialize_spec(spec: FilterSpecification) -> dict[str, Any]:
    return {item.name: _to_plain(getattr(spec, item.name)) for item in fields(spec)}


def deserialize_spec(blob: Mapping[str, Any], prior: FilterSpecification) -> FilterSpecification:
    """
    Merge a saved blob onto ``prior``. Missing or null keys keep the prior
    value and unknown keys are ignored. Any malformed value raises
    SavedSearchError before anything is applied.
    """
    if not isinstance(blob, Mapping):
        raise SavedSearchError(f"Saved search must be an object, got {type(blob).__name__}")
    updates: dict[str, Any] = {}
    for name, coerce in _COERCERS.items():
        raw = blob.get(name)
        if raw is None:
            continue
        try:
            updates[name] = coerce(raw)
        except (TypeError, ValueError) as exc:
            raise SavedSearchError(f"Invalid saved search field {name}: {exc}") from exc
    return replace(prior, **updates)


def save_search(store: PreferenceStore, spec: FilterSpecification, key: str = SAVED_SEARCH_KEY) -> None:
    payload = json.dumps(serialize_spec(spec), sort_keys=True, ensure_ascii=False)
    store.save(key, payload)


def load_search(
    store: PreferenceStore,
    prior: FilterSpecification,
    key: str = SAVED_SEARCH_KEY,
) -> tuple[FilterSpecification, bool]:
    """
    Returns (spec, loaded). On a missing or corrupt blob the prior spec is
    returned untouched.
    """
    try:
        raw = store.load(key)
        if raw is None:
            LOGGER.info("No saved search found for key=%s", key)
            return prior, False
        return deserialize_spec(json.loads(raw), prior), True
    except ValueError as exc:
        LOGGER.warning("Failed to load saved search key=%s: %s", key, exc)
        return prior, False


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_to_plain(item) for item in value]
    return value


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"expected text, got {type(value).__name__}")


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected number, got {type(value).__name__}")
    return value


def _integer(value: Any) -> int:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected integer, got {type(value).__name__}")
    return value


def _flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected boolean, got {type(value).__name__}")
    return value


def _sequence(item_coerce: Callable[[Any], Any]) -> Callable[[Any], tuple[Any, ...]]:
    def coerce(value: Any) -> tuple[Any, ...]:
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"expected list, got {type(value).__name__}")
        return tuple(item_coerce(item) for item in value)

    return coerce


def _strict_text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected text, got {type(value).__name__}")
    return value


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "listing_type": ListingType,
    "search_term": _strict_text,
    "min_price": _text,
    "max_price": _text,
    "price_filter_mode": PriceFilterMode,
    "monthly_min": _number,
    "monthly_max": _number,
    "property_types": _sequence(PropertyType),
    "bedrooms": _sequence(_integer),
    "bathrooms": _sequence(_integer),
    "balconies": _sequence(_integer),
    "additional_rooms": _sequence(_strict_text),
    "construction_statuses": _sequence(ConstructionStatus),
    "listed_by": _sequence(ListedBy),
    "furnished_statuses": _sequence(FurnishedStatus),
    "ownership_types": _sequence(OwnershipType),
    "amenities": _sequence(_strict_text),
    "rera_only": _flag,
    "all_inclusive_only": _flag,
    "negotiable_only": _flag,
    "tax_excluded_only": _flag,
    "showcase_only": _flag,
    "video_3d_only": _flag,
    "floor_bands": _sequence(FloorBand),
    "building_heights": _sequence(BuildingHeight),
    "entry_facing": _sequence(Facing),
    "exit_facing": _sequence(Facing),
    "min_parking": _integer,
    "min_carpet_area": _text,
    "min_built_up_area": _text,
    "min_super_area": _text,
    "min_year_built": _text,
    "max_year_built": _text,
    "parking_types": _sequence(ParkingType),
    "views": _sequence(ViewType),
    "documents": _sequence(_strict_text),
}
