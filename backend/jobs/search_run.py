from __future__ import annotations

import argparse
import logging
import os
import time
from dataclasses import replace
from typing import Any

from backend.collectors.base import Collector
from backend.collectors.database.collector import SupabaseCollector
from backend.collectors.rest_api.collector import ApiCollector
from backend.core.filtering import apply_filters
from backend.core.models import FilterSpecification, ListingType, Property
from backend.core.preferences import JsonFilePreferenceStore, PreferenceStore, SupabasePreferenceStore
from backend.core.pricing import calculate_emi, format_price
from backend.core.saved_search import load_search, save_search
from backend.core.supabase_repo import SupabaseRepo


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
LOGGER = logging.getLogger(__name__)


def _collectors_by_name() -> dict[str, Collector]:
    return {
        "supabase": SupabaseCollector(),
        "api": ApiCollector(),
    }


def run_search(
    listing_type: ListingType,
    source_name: str | None = None,
    search_term: str | None = None,
    load_key: str | None = None,
    save_key: str | None = None,
    store: PreferenceStore | None = None,
    collectors: dict[str, Collector] | None = None,
) -> list[Property]:
    source_name = source_name or os.environ.get("LISTINGS_SOURCE") or "supabase"
    collectors = collectors if collectors is not None else _collectors_by_name()
    collector = collectors.get(source_name)
    if collector is None:
        raise ValueError(f"No collector implementation for source={source_name}")

    spec = FilterSpecification(listing_type=listing_type)
    if load_key:
        spec, loaded = load_search(_require_store(store), spec, key=load_key)
        if loaded:
            LOGGER.info("Loaded saved search key=%s", load_key)
        # A saved search never switches the listings view.
        spec = replace(spec, listing_type=listing_type)
    if search_term is not None:
        spec = replace(spec, search_term=search_term)

    max_attempts = _env_int("SEARCH_FETCH_ATTEMPTS", 3)
    raw_items = _fetch_with_retry(
        lambda: collector.fetch(listing_type.value),
        source_name=source_name,
        max_attempts=max_attempts,
    )
    properties = [prop for prop in (collector.normalize(item) for item in raw_items) if prop is not None]
    LOGGER.info("Source=%s fetched=%s normalized=%s", source_name, len(raw_items), len(properties))

    results = apply_filters(properties, spec)
    LOGGER.info("%s listings found matching your criteria", len(results))

    if save_key:
        save_search(_require_store(store), spec, key=save_key)
        LOGGER.info("Saved search key=%s", save_key)
    return results


def describe_listing(prop: Property) -> str:
    parts = [prop.title or "(untitled)", format_price(prop.price)]
    if prop.listing_type == ListingType.SALE:
        parts.append(f"EMI {format_price(round(calculate_emi(prop.price)))}/mo")
    location = ", ".join(text for text in (prop.location, prop.city) if text)
    if location:
        parts.append(location)
    return " | ".join(parts)


def _require_store(store: PreferenceStore | None) -> PreferenceStore:
    if store is None:
        raise ValueError("A preference store is required to load or save searches.")
    return store


def _fetch_with_retry(fetch_func: Any, source_name: str, max_attempts: int = 3) -> list[dict[str, Any]]:
    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            result = fetch_func()
            return result if isinstance(result, list) else []
        except Exception as exc:  # noqa: BLE001
            last_error = exc
            if attempt >= max_attempts:
                break
            wait_seconds = attempt * 2
            LOGGER.warning(
                "Fetch retry source=%s attempt=%s/%s wait=%ss error=%s",
                source_name,
                attempt,
                max_attempts,
                wait_seconds,
                exc,
            )
            time.sleep(wait_seconds)
    if last_error:
        raise last_error
    return []


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except (TypeError, ValueError):
        return default


def _build_store(user_id: str | None, prefs_file: str | None) -> PreferenceStore:
    if user_id:
        return SupabasePreferenceStore(SupabaseRepo(), user_id)
    return JsonFilePreferenceStore(prefs_file)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Filter approved listings and print the matches.")
    parser.add_argument("--type", choices=[item.value for item in ListingType], default=ListingType.SALE.value)
    parser.add_argument("--source", choices=["supabase", "api"], help="Listing source (default: LISTINGS_SOURCE).")
    parser.add_argument("--search", help="Case-insensitive text matched against location, city and title.")
    parser.add_argument("--load", metavar="KEY", help="Restore a saved search before filtering.")
    parser.add_argument("--save", metavar="KEY", help="Save the effective search after filtering.")
    parser.add_argument("--user-id", help="Keep saved searches in Supabase for this user.")
    parser.add_argument("--prefs-file", help="JSON file for saved searches (default: SAVED_SEARCH_PATH).")
    args = parser.parse_args()

    preference_store = _build_store(args.user_id, args.prefs_file) if (args.load or args.save) else None
    matches = run_search(
        ListingType(args.type),
        source_name=args.source,
        search_term=args.search,
        load_key=args.load,
        save_key=args.save,
        store=preference_store,
    )
    for match in matches:
        LOGGER.info("%s", describe_listing(match))
