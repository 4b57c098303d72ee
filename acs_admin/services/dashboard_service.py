from __future__ import annotations

from typing import Dict, List, Optional, Union

from acs_admin.schemas.dashboard_schemas import CounterItem, DistResult, SysInfo
from acs_admin.services.base_service import BaseService


class DashboardService(BaseService):
    """Overview counters, fleet distribution and ACS host status."""

    async def overview(self) -> List[CounterItem]:
        raw = await self._client.get("/admin/overview/data")
        return [CounterItem.model_validate(item) for item in raw or []]

    async def overview_counters(self) -> Dict[str, Optional[Union[int, float]]]:
        """Overview counters keyed by display name."""
        return {item.name: item.value for item in await self.overview()}

    async def distribution(self) -> DistResult:
        raw = await self._client.get("/admin/overview/distribution")
        return DistResult.model_validate(raw or {})

    async def system_status(self) -> SysInfo:
        raw = await self._client.get("/admin/sysstatus/data")
        return SysInfo.model_validate(raw)
