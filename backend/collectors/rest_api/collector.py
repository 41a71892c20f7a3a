from __future__ import annotations

import os
from typing import Any

import httpx

from backend.collectors.base import Collector
from backend.core.models import Property, PropertyStatus
from backend.core.normalize import row_to_property


DEFAULT_API_URL = "http://localhost:5000"


class ApiCollector(Collector):
    """
    Reads the Express `/api/properties` endpoint. It returns every row, so
    status and listing type are narrowed here.
    """

    source_name = "api"

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or os.environ.get("LISTINGS_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def fetch(self, listing_type: str) -> list[dict[str, Any]]:
        with httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            response = client.get("/api/properties")
            response.raise_for_status()
            payload = response.json()
        if not isinstance(payload, list):
            raise ValueError(f"Unexpected /api/properties payload: {type(payload).__name__}")
        return [
            row
            for row in payload
            if isinstance(row, dict)
            and row.get("listing_type") == listing_type
            and row.get("status", PropertyStatus.APPROVED.value) == PropertyStatus.APPROVED.value
        ]

    def normalize(self, raw_item: dict[str, Any]) -> Property | None:
        return row_to_property(raw_item)
