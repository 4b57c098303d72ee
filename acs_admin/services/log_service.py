from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Optional

from acs_admin.schemas.common import Page
from acs_admin.schemas.log_schemas import OprLog
from acs_admin.services.base_service import BaseService

PAGE_SIZE = 50
DEFAULT_WINDOW_DAYS = 30
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_backend_time(value: datetime) -> str:
    # The backend compares against naive local timestamps, so no UTC conversion.
    return value.strftime(TIME_FORMAT)


class LogService(BaseService):
    async def query(
        self,
        start: int = 0,
        count: int = PAGE_SIZE,
        keyword: Optional[str] = None,
        *,
        days: int = DEFAULT_WINDOW_DAYS,
        now: Optional[datetime] = None,
    ) -> Page[OprLog]:
        """Operator log entries from the last ``days`` days ending at ``now``."""
        if days <= 0:
            raise ValueError("days must be positive")
        end = now or datetime.now()
        params: Dict[str, str] = {
            "start": str(start),
            "count": str(count),
            "starttime": format_backend_time(end - timedelta(days=days)),
            "endtime": format_backend_time(end),
        }
        if keyword:
            params["keyword"] = keyword
        raw = await self._client.get("/admin/logging/query", params=params)
        return Page[OprLog].model_validate(raw)
