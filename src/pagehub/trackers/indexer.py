"""REST content indexer client providing author lookups for one chain."""

from __future__ import annotations

import logging
from typing import Any

from pagehub.core.exceptions import AdapterUnavailableError
from pagehub.core.models import AuthorRecord
from pagehub.trackers.transport import HttpTransport, TransportConfig

logger = logging.getLogger(__name__)


class ChainIndexer(HttpTransport):
    """
    Author directory backed by a chain's content indexer.

    Endpoints:
        GET /authors/{address}          author record, 404 when unknown
        GET /authors/{address}/content  list of authored publications

    Responses may be bare JSON or wrapped as `{"data": ...}`.
    """

    def __init__(self, chain: str, config: TransportConfig) -> None:
        super().__init__(config, source=f"indexer:{chain}")
        self.chain = chain

    async def _get(self, path: str) -> Any | None:
        response = await self._send("GET", path)
        if response.status_code == 404:
            return None
        if not response.is_success:
            raise AdapterUnavailableError(
                message=f"GET {path} returned {response.status_code}",
                source=self.source,
                status_code=response.status_code,
            )
        body = response.json()
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def get_author_by_address(self, address: str) -> AuthorRecord | None:
        data = await self._get(f"/authors/{address}")
        if not data:
            return None
        return AuthorRecord.model_validate(
            {**data, "address": data.get("address") or address, "chain": self.chain}
        )

    async def get_content_by_author(self, address: str) -> list[dict[str, Any]]:
        data = await self._get(f"/authors/{address}/content")
        if not data:
            return []
        if not isinstance(data, list):
            logger.warning(f"{self.source} returned non-list content for {address}")
            return []
        return [{"chain": self.chain, **item} for item in data if isinstance(item, dict)]
