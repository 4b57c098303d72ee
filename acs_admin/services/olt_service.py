from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from acs_admin.schemas.common import Envelope, IdName
from acs_admin.schemas.cpe_schemas import OdpCpe
from acs_admin.schemas.olt_schemas import (
    OdcDevice,
    OdpDevice,
    OltCreate,
    OltDevice,
    OltOnuData,
    OltUpdate,
    OnuLookup,
)
from acs_admin.services.base_service import BaseService

logger = logging.getLogger(__name__)

DEFAULT_SNMP_PORT = 161


class OltService(BaseService):
    """Fibre plant inventory: OLTs, their polled ONUs, and ODC/ODP records."""

    # ---- OLT ----
    async def list_olts(self) -> List[OltDevice]:
        raw = await self._client.get("/admin/olt/list")
        return [OltDevice.model_validate(item) for item in raw or []]

    async def add_olt(self, olt: OltCreate) -> Envelope[Any]:
        return await self._json_command("/admin/olt/add", olt.model_dump())

    async def update_olt(self, olt: OltUpdate) -> Envelope[Any]:
        return await self._json_command("/admin/olt/update", olt.model_dump())

    async def delete_olt(self, olt_id: int | str) -> Envelope[Any]:
        logger.info("olt_delete", extra={"olt_id": olt_id})
        return await self._command("/admin/olt/delete", {"id": olt_id})

    async def test_connection(
        self,
        ip_address: str,
        snmp_community: str,
        snmp_port: int = DEFAULT_SNMP_PORT,
    ) -> Envelope[Any]:
        """Ask the backend to probe an OLT over SNMP before saving it."""
        return await self._command(
            "/admin/olt/test",
            {"ip_address": ip_address, "snmp_port": snmp_port, "snmp_community": snmp_community},
        )

    async def onus(self, olt_id: int | str) -> List[OltOnuData]:
        raw = await self._client.get(f"/admin/olt/{olt_id}/onus")
        return [OltOnuData.model_validate(item) for item in raw or []]

    async def onu_by_sn(self, sn: str) -> OnuLookup:
        raw = await self._client.get(f"/admin/olt/onu/{sn}")
        return OnuLookup.model_validate(raw)

    async def topology(self, sn: str) -> Dict[str, Any]:
        """OLT → ODC → ODP → ONU path for a CPE; ``{"found": False}`` when unknown."""
        raw = await self._client.get(f"/admin/olt/topology/{sn}")
        return dict(raw or {"found": False})

    # ---- ODC ----
    async def list_odcs(self) -> List[OdcDevice]:
        raw = await self._client.get("/admin/odc/list")
        return [OdcDevice.model_validate(item) for item in raw or []]

    async def add_odc(
        self,
        name: str,
        *,
        capacity: int = 0,
        olt_id: Optional[int | str] = None,
        pon_port: Optional[str] = None,
        location: Optional[str] = None,
        address: Optional[str] = None,
        latitude: Optional[str] = None,
        longitude: Optional[str] = None,
        remark: Optional[str] = None,
    ) -> Envelope[Any]:
        return await self._command(
            "/admin/odc/add",
            {
                "name": name,
                "capacity": capacity,
                "olt_id": olt_id,
                "pon_port": pon_port,
                "location": location,
                "address": address,
                "latitude": latitude,
                "longitude": longitude,
                "remark": remark,
            },
        )

    async def update_odc(self, odc: OdcDevice) -> Envelope[Any]:
        # the backend overwrites every column, so send the full record
        values = odc.model_dump(exclude={"created_at", "updated_at"})
        return await self._command("/admin/odc/update", values)

    async def delete_odc(self, odc_id: int | str) -> Envelope[Any]:
        return await self._command("/admin/odc/delete", {"id": odc_id})

    async def odc_options(self) -> List[IdName]:
        raw = await self._client.get("/admin/odc/options")
        return [IdName.model_validate(item) for item in raw or []]

    # ---- ODP ----
    async def list_odps(self) -> List[OdpDevice]:
        raw = await self._client.get("/admin/odp/list")
        return [OdpDevice.model_validate(item) for item in raw or []]

    async def add_odp(
        self,
        name: str,
        odc_id: int | str,
        *,
        capacity: int = 0,
        used_ports: int = 0,
        location: Optional[str] = None,
        address: Optional[str] = None,
        latitude: Optional[str] = None,
        longitude: Optional[str] = None,
        remark: Optional[str] = None,
    ) -> Envelope[Any]:
        if used_ports < 0 or (capacity and used_ports > capacity):
            raise ValueError("used_ports must be within capacity")
        return await self._command(
            "/admin/odp/add",
            {
                "name": name,
                "odc_id": odc_id,
                "capacity": capacity,
                "used_ports": used_ports,
                "location": location,
                "address": address,
                "latitude": latitude,
                "longitude": longitude,
                "remark": remark,
            },
        )

    async def update_odp(self, odp: OdpDevice) -> Envelope[Any]:
        values = odp.model_dump(exclude={"created_at", "updated_at"})
        return await self._command("/admin/odp/update", values)

    async def delete_odp(self, odp_id: int | str) -> Envelope[Any]:
        return await self._command("/admin/odp/delete", {"id": odp_id})

    async def odp_options(self) -> List[IdName]:
        raw = await self._client.get("/admin/odp/options")
        return [IdName.model_validate(item) for item in raw or []]

    async def odp_cpes(self, odp_id: int | str) -> List[OdpCpe]:
        raw = await self._client.get(f"/admin/odp/{odp_id}/cpes")
        return [OdpCpe.model_validate(item) for item in raw or []]
