from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from typing import Any

from backend.core.normalize import property_to_record, row_to_property
from backend.core.supabase_repo import SupabaseRepo


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
LOGGER = logging.getLogger(__name__)


def post_listing(row: dict[str, Any], owner_id: str, repo: Any = None) -> dict[str, Any]:
    """
    Validate a submitted listing and insert it for moderation.
    """
    prop = row_to_property(row)
    if prop is None:
        raise ValueError("Listing needs a non-negative price and a listing type of sale or rent.")
    if not (prop.carpet_area or prop.built_up_area or prop.super_built_up_area):
        raise ValueError("At least one area type (Carpet, Built-up, or Super Built-up) is mandatory.")
    if not prop.title:
        bedrooms = f"{prop.bedrooms} BHK " if prop.bedrooms else ""
        kind = prop.property_type.value if prop.property_type else "Property"
        prop = replace(prop, title=f"{bedrooms}{kind} in {prop.location or prop.city}".strip())

    record = property_to_record(replace(prop, owner_id=owner_id))
    record.pop("id", None)
    inserted = (repo or SupabaseRepo()).insert_property(record)
    LOGGER.info("Posted listing title=%s id=%s pending approval", prop.title, inserted.get("id"))
    return inserted


def _read_listing(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Listing file {path} does not hold a JSON object.")
    return data


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Submit a listing for admin approval.")
    parser.add_argument("listing", help="JSON file with one `properties` row.")
    parser.add_argument("--owner-id", required=True, help="User posting the listing.")
    args = parser.parse_args()

    post_listing(_read_listing(args.listing), owner_id=args.owner_id)
