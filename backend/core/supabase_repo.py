from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any

from supabase import Client, create_client


class SupabaseRepo:
    def __init__(self, url: str | None = None, service_role_key: str | None = None) -> None:
        supabase_url = url or os.environ.get("SUPABASE_URL")
        supabase_key = service_role_key or os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required.")
        self.client: Client = create_client(supabase_url, supabase_key)

    def get_approved_properties(self, listing_type: str) -> list[dict[str, Any]]:
        return (
            self.client.table("properties")
            .select("*")
            .eq("status", "Approved")
            .eq("listing_type", listing_type)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )

    def get_property(self, property_id: str) -> dict[str, Any] | None:
        rows = self.client.table("properties").select("*").eq("id", property_id).limit(1).execute().data or []
        return rows[0] if rows else None

    def insert_property(self, row: dict[str, Any]) -> dict[str, Any]:
        response = self.client.table("properties").insert(row).execute()
        return (response.data or [{}])[0]

    def get_properties_for_owner(self, owner_id: str) -> list[dict[str, Any]]:
        return (
            self.client.table("properties")
            .select("*")
            .eq("owner_id", owner_id)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )

    def insert_lead(self, row: dict[str, Any]) -> dict[str, Any]:
        response = self.client.table("leads").insert(row).execute()
        return (response.data or [{}])[0]

    def get_leads_for_seller(self, seller_id: str) -> list[dict[str, Any]]:
        return (
            self.client.table("leads")
            .select("*")
            .eq("seller_id", seller_id)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )

    def get_preference(self, user_id: str, key: str) -> str | None:
        rows = (
            self.client.table("user_preferences")
            .select("value")
            .eq("user_id", user_id)
            .eq("key", key)
            .limit(1)
            .execute()
            .data
            or []
        )
        return rows[0].get("value") if rows else None

    def upsert_preference(self, user_id: str, key: str, value: str) -> None:
        self.client.table("user_preferences").upsert(
            {
                "user_id": user_id,
                "key": key,
                "value": value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="user_id,key",
        ).execute()
