"""
Event Feed Fetcher

Fetches the week of events as a JSON array of raw records.

PRINCIPLES:
===========
1. Failed fetches are first-class results, never exceptions
2. One request per render cycle, no retries
3. Records are returned raw; timestamps are parsed downstream
"""

from __future__ import annotations
from typing import List, Optional, Tuple
from datetime import datetime, timezone
import json

import httpx

from .contracts import EventSource, FetchResult, FetchStatus, RawEventRecord


class EventFetcher:
    """
    Fetches the weekly event feed.

    GUARANTEES:
    ===========
    1. Always returns a FetchResult, whatever went wrong
    2. A non-array payload is a PARSE_ERROR with no records
    3. Records keep wire order
    """

    def __init__(
        self,
        source: Optional[EventSource] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._source = source or EventSource()
        self._transport = transport
        self._async_transport = async_transport

    @property
    def source(self) -> EventSource:
        return self._source

    async def fetch(self) -> Tuple[FetchResult, List[RawEventRecord]]:
        """
        Fetch the feed.

        Returns:
            - FetchResult (always)
            - List[RawEventRecord] (empty unless the fetch succeeded)
        """
        attempted_at = datetime.now(timezone.utc)

        try:
            async with httpx.AsyncClient(
                timeout=self._source.timeout,
                transport=self._async_transport
            ) as client:
                response = await client.get(
                    self._source.url,
                    headers=self._headers(),
                    follow_redirects=True
                )
        except httpx.TimeoutException:
            return self._failure(attempted_at, FetchStatus.TIMEOUT, "Request timed out"), []
        except httpx.HTTPError as e:
            return self._failure(attempted_at, FetchStatus.NETWORK_ERROR, str(e)), []

        return self._handle_response(attempted_at, response)

    def fetch_sync(self) -> Tuple[FetchResult, List[RawEventRecord]]:
        """Synchronous version of fetch."""
        attempted_at = datetime.now(timezone.utc)

        try:
            with httpx.Client(
                timeout=self._source.timeout,
                transport=self._transport
            ) as client:
                response = client.get(
                    self._source.url,
                    headers=self._headers(),
                    follow_redirects=True
                )
        except httpx.TimeoutException:
            return self._failure(attempted_at, FetchStatus.TIMEOUT, "Request timed out"), []
        except httpx.HTTPError as e:
            return self._failure(attempted_at, FetchStatus.NETWORK_ERROR, str(e)), []

        return self._handle_response(attempted_at, response)

    def _headers(self) -> dict:
        return {'User-Agent': self._source.user_agent, 'Accept': 'application/json'}

    def _handle_response(
        self,
        attempted_at: datetime,
        response: httpx.Response
    ) -> Tuple[FetchResult, List[RawEventRecord]]:
        if response.status_code != 200:
            return self._failure(
                attempted_at,
                FetchStatus.HTTP_ERROR,
                f"HTTP {response.status_code}",
                http_status=response.status_code
            ), []

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return self._failure(
                attempted_at, FetchStatus.PARSE_ERROR, f"Invalid JSON: {e}",
                http_status=response.status_code
            ), []

        if not isinstance(payload, list):
            return self._failure(
                attempted_at, FetchStatus.PARSE_ERROR,
                f"Expected a JSON array, got {type(payload).__name__}",
                http_status=response.status_code
            ), []

        records = [RawEventRecord.from_wire(item) for item in payload]
        result = FetchResult(
            result_id=FetchResult.generate_id(self._source, attempted_at),
            source_id=self._source.source_id,
            url=self._source.url,
            attempted_at=attempted_at,
            completed_at=datetime.now(timezone.utc),
            status=FetchStatus.SUCCESS,
            records_count=len(records),
            http_status=response.status_code
        )
        return result, records

    def _failure(
        self,
        attempted_at: datetime,
        status: FetchStatus,
        message: str,
        http_status: Optional[int] = None
    ) -> FetchResult:
        return FetchResult(
            result_id=FetchResult.generate_id(self._source, attempted_at),
            source_id=self._source.source_id,
            url=self._source.url,
            attempted_at=attempted_at,
            completed_at=datetime.now(timezone.utc),
            status=status,
            error_message=message,
            http_status=http_status
        )
