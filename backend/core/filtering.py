from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from dataclasses import replace
from typing import Any

from backend.core.models import (
    BuildingHeight,
    FilterSpecification,
    FloorBand,
    ListingType,
    PriceFilterMode,
    Property,
)
from backend.core.pricing import calculate_emi, parse_int_text


# (selected value meaning "or more", threshold it stands for)
BEDROOM_PLUS_BAND = (5, 4)
BATHROOM_PLUS_BAND = (4, 4)
# Balconies "4+" starts at 3, unlike the other two room bands.
BALCONY_PLUS_BAND = (4, 3)

MIN_YEAR_DEFAULT = 0
MAX_YEAR_DEFAULT = 9999

FLOOR_BANDS: dict[FloorBand, Callable[[int], bool]] = {
    FloorBand.GROUND_TO_5: lambda f: 0 <= f <= 5,
    FloorBand.FLOOR_5_TO_10: lambda f: 5 < f <= 10,
    FloorBand.FLOOR_10_TO_15: lambda f: 10 < f <= 15,
    FloorBand.FLOOR_15_TO_20: lambda f: 15 < f <= 20,
    FloorBand.FLOOR_20_TO_25: lambda f: 20 < f <= 25,
    FloorBand.ABOVE_25: lambda f: f > 25,
}

BUILDING_HEIGHTS: dict[BuildingHeight, Callable[[int], bool]] = {
    BuildingHeight.LOW_RISE: lambda total: total <= 4,
    BuildingHeight.MID_RISE: lambda total: 4 < total <= 12,
    BuildingHeight.HIGH_RISE: lambda total: total > 12,
}

Predicate = Callable[[Property, FilterSpecification], bool]


def matches_any(selected: Collection[Any], value: Any) -> bool:
    """
    OR within a group: inactive when nothing is selected, otherwise the
    value must be present and one of the selections.
    """
    if not selected:
        return True
    return value is not None and value in selected


def matches_all(selected: Collection[Any], values: Collection[Any] | None) -> bool:
    """
    AND within a group: every selection must be contained in the values.
    Absent values fail an active group.
    """
    if not selected:
        return True
    if values is None:
        return False
    return all(item in values for item in selected)


def matches_room_band(selected: Collection[int], count: int | None, plus_band: tuple[int, int]) -> bool:
    if not selected:
        return True
    if count is None:
        return False
    plus_value, threshold = plus_band
    return any(count >= threshold if n == plus_value else count == n for n in selected)


def _listing_type(prop: Property, spec: FilterSpecification) -> bool:
    return prop.listing_type == spec.listing_type


def _search_term(prop: Property, spec: FilterSpecification) -> bool:
    if not spec.search_term:
        return True
    needle = spec.search_term.lower()
    return any(needle in (text or "").lower() for text in (prop.location, prop.city, prop.title))


def _price(prop: Property, spec: FilterSpecification) -> bool:
    if spec.listing_type == ListingType.SALE and spec.price_filter_mode == PriceFilterMode.MONTHLY:
        emi = calculate_emi(prop.price)
        return spec.monthly_min <= emi <= spec.monthly_max
    min_price = parse_int_text(spec.min_price)
    max_price = parse_int_text(spec.max_price)
    if min_price is not None and prop.price < min_price:
        return False
    if max_price is not None and prop.price > max_price:
        return False
    return True


def _boolean_gates(prop: Property, spec: FilterSpecification) -> bool:
    gates = (
        (spec.all_inclusive_only, prop.all_inclusive_price),
        (spec.negotiable_only, prop.price_negotiable),
        (spec.tax_excluded_only, prop.tax_excluded),
        (spec.rera_only, prop.rera_approved),
        (spec.showcase_only, prop.has_showcase),
        (spec.video_3d_only, prop.has_3d_video),
    )
    return all(bool(flag) for required, flag in gates if required)


def _property_type(prop: Property, spec: FilterSpecification) -> bool:
    return matches_any(spec.property_types, prop.property_type)


def _rooms(prop: Property, spec: FilterSpecification) -> bool:
    return (
        matches_room_band(spec.bedrooms, prop.bedrooms, BEDROOM_PLUS_BAND)
        and matches_room_band(spec.bathrooms, prop.bathrooms, BATHROOM_PLUS_BAND)
        and matches_room_band(spec.balconies, prop.balconies or 0, BALCONY_PLUS_BAND)
    )


def _additional_rooms(prop: Property, spec: FilterSpecification) -> bool:
    return matches_all(spec.additional_rooms, prop.additional_rooms)


def _listing_attributes(prop: Property, spec: FilterSpecification) -> bool:
    return (
        matches_any(spec.construction_statuses, prop.construction_status)
        and matches_any(spec.listed_by, prop.listed_by)
        and matches_any(spec.furnished_statuses, prop.furnished_status)
        and matches_any(spec.ownership_types, prop.ownership_type)
    )


def _amenities(prop: Property, spec: FilterSpecification) -> bool:
    if not spec.amenities:
        return True
    owned = [amenity.lower() for amenity in prop.amenities]
    return all(any(wanted.lower() in amenity for amenity in owned) for wanted in spec.amenities)


def _floor_band(prop: Property, spec: FilterSpecification) -> bool:
    if not spec.floor_bands or prop.floor is None:
        return True
    return any(FLOOR_BANDS[band](prop.floor) for band in spec.floor_bands)


def _building_height(prop: Property, spec: FilterSpecification) -> bool:
    heights = spec.building_heights
    if not heights or BuildingHeight.ALL in heights or prop.total_floors is None:
        return True
    return any(BUILDING_HEIGHTS[height](prop.total_floors) for height in heights)


def _facing(prop: Property, spec: FilterSpecification) -> bool:
    if prop.facing is not None and not matches_any(spec.entry_facing, prop.facing):
        return False
    if prop.exit_facing is not None and not matches_any(spec.exit_facing, prop.exit_facing):
        return False
    return True


def _parking_spaces(prop: Property, spec: FilterSpecification) -> bool:
    if spec.min_parking <= 0:
        return True
    return (prop.parking_spaces or 0) >= spec.min_parking


def _area_minimums(prop: Property, spec: FilterSpecification) -> bool:
    for min_text, area in (
        (spec.min_carpet_area, prop.carpet_area),
        (spec.min_built_up_area, prop.built_up_area),
        (spec.min_super_area, prop.super_built_up_area),
    ):
        minimum = parse_int_text(min_text)
        if minimum is None:
            continue
        if not area or area < minimum:
            return False
    return True


def _year_built(prop: Property, spec: FilterSpecification) -> bool:
    min_year = parse_int_text(spec.min_year_built)
    max_year = parse_int_text(spec.max_year_built)
    if min_year is None and max_year is None:
        return True
    if not prop.year_built:
        return False
    low = min_year if min_year is not None else MIN_YEAR_DEFAULT
    high = max_year if max_year is not None else MAX_YEAR_DEFAULT
    return low <= prop.year_built <= high


def _parking_type(prop: Property, spec: FilterSpecification) -> bool:
    return matches_any(spec.parking_types, prop.parking_type)


def _views(prop: Property, spec: FilterSpecification) -> bool:
    if not spec.views:
        return True
    return any(view in spec.views for view in prop.views or ())


def _documents(prop: Property, spec: FilterSpecification) -> bool:
    return matches_all(spec.documents, prop.documents)


# Evaluation order; the first failing predicate rejects the listing.
PREDICATES: tuple[Predicate, ...] = (
    _listing_type,
    _search_term,
    _price,
    _boolean_gates,
    _property_type,
    _rooms,
    _additional_rooms,
    _listing_attributes,
    _amenities,
    _floor_band,
    _building_height,
    _facing,
    _parking_spaces,
    _area_minimums,
    _year_built,
    _parking_type,
    _views,
    _documents,
)


def matches_spec(prop: Property, spec: FilterSpecification) -> bool:
    return all(predicate(prop, spec) for predicate in PREDICATES)


def apply_filters(properties: Iterable[Property], spec: FilterSpecification) -> list[Property]:
    """
    Stable filter: listings satisfying every active predicate, in input order.
    """
    return [prop for prop in properties if matches_spec(prop, spec)]


def toggle_selection(spec: FilterSpecification, field_name: str, item: Any) -> FilterSpecification:
    """
    Copy of the filters with ``item`` added to or removed from a selection field.
    """
    current = getattr(spec, field_name)
    if not isinstance(current, tuple):
        raise TypeError(f"{field_name} is not a selection field")
    if item in current:
        updated = tuple(value for value in current if value != item)
    else:
        updated = current + (item,)
    return replace(spec, **{field_name: updated})


def reset_filters(spec: FilterSpecification) -> FilterSpecification:
    return FilterSpecification(listing_type=spec.listing_type)
