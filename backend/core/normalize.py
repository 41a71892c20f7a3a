from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any, TypeVar

from backend.core.models import (
    ConstructionStatus,
    Facing,
    FurnishedStatus,
    ListedBy,
    ListingType,
    OwnershipType,
    ParkingType,
    Property,
    PropertyStatus,
    PropertyType,
    ViewType,
)


E = TypeVar("E", bound=Enum)


def row_to_property(row: dict[str, Any]) -> Property | None:
    """
    Map a `properties` table row to a Property. Rows without a price or a
    known listing type cannot be listed and map to None.
    """
    price = _safe_float(row.get("price"))
    listing_type = _safe_enum(ListingType, row.get("listing_type"))
    if price is None or price < 0 or listing_type is None:
        return None

    return Property(
        id=str(row["id"]) if row.get("id") is not None else None,
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        price=price,
        listing_type=listing_type,
        property_type=_safe_enum(PropertyType, row.get("type")),
        location=str(row.get("location") or ""),
        city=str(row.get("city") or ""),
        bedrooms=_safe_int(row.get("bedrooms")),
        bathrooms=_safe_int(row.get("bathrooms")),
        balconies=_safe_int(row.get("balconies")),
        area=_safe_float(row.get("area")),
        carpet_area=_safe_float(row.get("carpet_area")),
        built_up_area=_safe_float(row.get("built_up_area")),
        super_built_up_area=_safe_float(row.get("super_built_up_area")),
        amenities=_str_tuple(row.get("amenities")) or (),
        additional_rooms=_str_tuple(row.get("additional_rooms")),
        construction_status=_safe_enum(ConstructionStatus, row.get("construction_status")),
        furnished_status=_safe_enum(FurnishedStatus, row.get("furnished_status")),
        listed_by=_safe_enum(ListedBy, row.get("listed_by")),
        ownership_type=_safe_enum(OwnershipType, row.get("ownership_type")),
        facing=_safe_enum(Facing, row.get("facing_entry")),
        exit_facing=_safe_enum(Facing, row.get("facing_exit")),
        floor=_safe_int(row.get("floor_no")),
        total_floors=_safe_int(row.get("total_floors")),
        parking_spaces=_safe_int(row.get("parking_spaces")),
        parking_type=_safe_enum(ParkingType, row.get("parking_type")),
        year_built=_safe_int(row.get("year_built")),
        views=_enum_tuple(ViewType, row.get("views")),
        documents=_str_tuple(row.get("available_documents")),
        rera_approved=bool(row.get("rera_approved")),
        price_negotiable=bool(row.get("price_negotiable")),
        all_inclusive_price=bool(row.get("is_all_inclusive_price")),
        tax_excluded=bool(row.get("is_tax_excluded")),
        has_showcase=bool(row.get("has_showcase")),
        has_3d_video=bool(row.get("has_3d_video")),
        images=_str_tuple(row.get("images")) or (),
        owner_contact=row.get("owner_contact"),
        owner_id=str(row["owner_id"]) if row.get("owner_id") is not None else None,
        date_posted=row.get("created_at"),
        is_featured=bool(row.get("is_featured")),
        status=_safe_enum(PropertyStatus, row.get("status")),
    )


def property_to_record(prop: Property) -> dict[str, Any]:
    """
    Row for inserting a newly posted listing; it waits for moderation.
    """
    record: dict[str, Any] = {
        "title": prop.title,
        "description": prop.description,
        "price": prop.price,
        "listing_type": prop.listing_type.value,
        "type": _value(prop.property_type),
        "location": prop.location,
        "city": prop.city,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "balconies": prop.balconies,
        "area": prop.area,
        "carpet_area": prop.carpet_area,
        "built_up_area": prop.built_up_area,
        "super_built_up_area": prop.super_built_up_area,
        "amenities": list(prop.amenities),
        "additional_rooms": list(prop.additional_rooms) if prop.additional_rooms is not None else None,
        "construction_status": _value(prop.construction_status),
        "furnished_status": _value(prop.furnished_status),
        "listed_by": _value(prop.listed_by),
        "ownership_type": _value(prop.ownership_type),
        "facing_entry": _value(prop.facing),
        "facing_exit": _value(prop.exit_facing),
        "floor_no": prop.floor,
        "total_floors": prop.total_floors,
        "parking_spaces": prop.parking_spaces,
        "parking_type": _value(prop.parking_type),
        "year_built": prop.year_built,
        "views": [view.value for view in prop.views] if prop.views is not None else None,
        "available_documents": list(prop.documents) if prop.documents is not None else None,
        "rera_approved": prop.rera_approved,
        "price_negotiable": prop.price_negotiable,
        "is_all_inclusive_price": prop.all_inclusive_price,
        "is_tax_excluded": prop.tax_excluded,
        "has_showcase": prop.has_showcase,
        "has_3d_video": prop.has_3d_video,
        "images": list(prop.images),
        "owner_contact": prop.owner_contact,
        "owner_id": prop.owner_id,
        "is_featured": prop.is_featured,
        "status": PropertyStatus.PENDING.value,
    }
    if prop.id:
        record["id"] = prop.id
    return record


def lead_to_record(
    prop: Property,
    buyer_name: str,
    buyer_phone: str,
    message: str | None = None,
) -> dict[str, Any]:
    """
    Row for the `leads` table: a buyer's enquiry routed to the listing owner.
    """
    name = (buyer_name or "").strip()
    phone = (buyer_phone or "").strip()
    if not name or not phone:
        raise ValueError("Buyer name and phone are required.")
    if not prop.id:
        raise ValueError("Leads can only be captured for a stored listing.")
    return {
        "property_id": prop.id,
        "seller_id": prop.owner_id,
        "buyer_name": name,
        "buyer_phone": phone,
        "message": (message or "").strip() or f"I am interested in {prop.title}",
    }


def _value(member: Enum | None) -> Any:
    return member.value if member is not None else None


def _safe_enum(enum_cls: type[E], value: Any) -> E | None:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _safe_float(value: Any) -> float | None:
    try:
        parsed = float(value) if value is not None else None
    except (TypeError, ValueError):
        return None
    return parsed if parsed is not None and math.isfinite(parsed) else None


def _safe_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        parsed = _safe_float(value)
        return int(parsed) if parsed is not None else None


def _str_tuple(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str) and value.lstrip().startswith("["):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if isinstance(value, str):
        # Comma-joined text columns from the legacy MySQL schema.
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if item is not None)
    return None


def _enum_tuple(enum_cls: type[E], value: Any) -> tuple[E, ...] | None:
    items = _str_tuple(value)
    if items is None:
        return None
    return tuple(member for member in (_safe_enum(enum_cls, item) for item in items) if member is not None)
