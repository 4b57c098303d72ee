from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from acs_admin.schemas.common import Envelope, Page
from acs_admin.schemas.cpe_schemas import CpeParam, NetCpe
from acs_admin.services.base_service import BaseService

logger = logging.getLogger(__name__)

PAGE_SIZE = 20


class CpeService(BaseService):
    """CPE inventory: listing, detail, parameter tree and edits."""

    async def query(self, start: int = 0, count: int = PAGE_SIZE, keyword: Optional[str] = None) -> Page[NetCpe]:
        params: Dict[str, str] = {"start": str(start), "count": str(count)}
        if keyword:
            params["keyword"] = keyword
        raw = await self._client.get("/admin/cpe/query", params=params)
        return Page[NetCpe].model_validate(raw)

    async def iter_all(self, keyword: Optional[str] = None, page_size: int = PAGE_SIZE) -> AsyncIterator[NetCpe]:
        """Walk every page of the listing, stopping on the first empty page."""
        start = 0
        while True:
            page = await self.query(start=start, count=page_size, keyword=keyword)
            if not page.data:
                return
            for cpe in page.data:
                yield cpe
            start += len(page.data)
            if start >= page.total_count:
                return

    async def get(self, cpe_id: int | str) -> NetCpe:
        raw = await self._client.get("/admin/cpe/get", params={"id": str(cpe_id)})
        return NetCpe.model_validate(raw)

    async def params(self, sn: str) -> List[CpeParam]:
        raw = await self._client.get("/admin/cpe/params", params={"sn": sn})
        return [CpeParam.model_validate(item) for item in raw or []]

    async def update(self, cpe_id: int | str, **fields: Any) -> Envelope[Any]:
        if not fields:
            raise ValueError("no fields to update")
        logger.debug("cpe_update", extra={"cpe_id": cpe_id, "fields": sorted(fields)})
        return await self._command("/admin/cpe/update", {"id": cpe_id, **fields})

    async def assign_odp(self, cpe_id: int | str, odp_id: int | str) -> Envelope[Any]:
        return await self._command("/admin/cpe/assign-odp", {"cpe_id": cpe_id, "odp_id": odp_id})
