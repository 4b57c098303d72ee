from __future__ import annotations

import logging
from typing import Any, List, Optional

from acs_admin.schemas.common import Envelope, TypeOption
from acs_admin.services.base_service import BaseService

logger = logging.getLogger(__name__)

MAX_SSID_INDEX = 16


class SuperviseService(BaseService):
    """Device commands queued by the backend as CWMP tasks.

    Each command only schedules work; the device applies it on its next
    session with the ACS. ``None`` arguments are left out of the form,
    which the backend reads as "leave unchanged".
    """

    async def type_options(self) -> List[TypeOption]:
        raw = await self._client.get("/admin/supervise/type/options")
        return [TypeOption.model_validate(item) for item in raw or []]

    async def reboot(self, devid: int | str) -> Envelope[Any]:
        logger.info("supervise_reboot", extra={"devid": devid})
        return await self._command("/admin/supervise/reboot", {"devid": devid})

    async def set_wifi(
        self,
        devid: int | str,
        ssid_idx: int,
        *,
        ssid: Optional[str] = None,
        password: Optional[str] = None,
        channel: Optional[str] = None,
        enable: Optional[bool] = None,
    ) -> Envelope[Any]:
        if not 1 <= ssid_idx <= MAX_SSID_INDEX:
            raise ValueError("Invalid SSID index")
        logger.info("supervise_set_wifi", extra={"devid": devid, "ssid_idx": ssid_idx})
        return await self._command(
            "/admin/supervise/wifi/set",
            {
                "devid": devid,
                "ssid_idx": ssid_idx,
                "ssid": ssid,
                "password": password,
                "channel": channel,
                "enable": enable,
            },
        )

    async def set_wan(
        self,
        devid: int | str,
        dev_idx: int,
        conn_idx: int,
        *,
        conn_type: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        enable: Optional[bool] = None,
        ip_mode: Optional[str] = None,
        vlan_id: Optional[int | str] = None,
    ) -> Envelope[Any]:
        if dev_idx < 1 or conn_idx < 1:
            raise ValueError("Invalid WAN connection index")
        logger.info("supervise_set_wan", extra={"devid": devid, "dev_idx": dev_idx, "conn_idx": conn_idx})
        return await self._command(
            "/admin/supervise/wan/set",
            {
                "devid": devid,
                "dev_idx": dev_idx,
                "conn_idx": conn_idx,
                "conn_type": conn_type,
                "username": username,
                "password": password,
                "enable": enable,
                "ip_mode": ip_mode,
                "vlan_id": vlan_id,
            },
        )
