from __future__ import annotations

import argparse
import logging
from typing import Any

from backend.core.normalize import lead_to_record, row_to_property
from backend.core.supabase_repo import SupabaseRepo


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
LOGGER = logging.getLogger(__name__)

UNKNOWN_PROPERTY_TITLE = "Unknown Property"


def capture_lead(
    repo: Any,
    property_id: str,
    buyer_name: str,
    buyer_phone: str,
    message: str | None = None,
) -> dict[str, Any]:
    row = repo.get_property(property_id)
    prop = row_to_property(row) if row else None
    if prop is None:
        raise ValueError(f"No listing found for property_id={property_id}")
    inserted = repo.insert_lead(lead_to_record(prop, buyer_name, buyer_phone, message))
    LOGGER.info("Lead captured property_id=%s seller_id=%s", prop.id, prop.owner_id)
    return inserted


def leads_for_seller(repo: Any, seller_id: str) -> list[dict[str, Any]]:
    """
    Seller's leads, newest first, each tagged with the title of the listing
    it was sent for.
    """
    titles = {str(row.get("id")): row.get("title") for row in repo.get_properties_for_owner(seller_id)}
    return [
        {**lead, "property_title": titles.get(str(lead.get("property_id"))) or UNKNOWN_PROPERTY_TITLE}
        for lead in repo.get_leads_for_seller(seller_id)
    ]


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Capture buyer leads or list a seller's leads.")
    commands = parser.add_subparsers(dest="command", required=True)

    capture = commands.add_parser("capture", help="Send a buyer enquiry to the listing owner.")
    capture.add_argument("--property-id", required=True)
    capture.add_argument("--name", required=True)
    capture.add_argument("--phone", required=True)
    capture.add_argument("--message")

    listing = commands.add_parser("list", help="Show leads received by a seller.")
    listing.add_argument("--seller-id", required=True)
    args = parser.parse_args()

    supabase_repo = SupabaseRepo()
    if args.command == "capture":
        capture_lead(supabase_repo, args.property_id, args.name, args.phone, args.message)
    else:
        leads = leads_for_seller(supabase_repo, args.seller_id)
        LOGGER.info("%s leads for seller_id=%s", len(leads), args.seller_id)
        for lead in leads:
            LOGGER.info(
                "%s | %s %s | %s",
                lead["property_title"],
                lead.get("buyer_name"),
                lead.get("buyer_phone"),
                lead.get("message"),
            )
