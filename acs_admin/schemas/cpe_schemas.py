from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class WifiItem(BaseModel):
    idx: int = 0
    ssid: str = ""
    password: str = ""
    enable: str = ""
    channel: str = ""


class WanItem(BaseModel):
    name: str = ""
    service: str = ""
    ip: str = ""
    username: str = ""
    type: str = ""
    enable: str = ""
    vlan_id: str = ""
    ipv6_ip: str = ""
    ip_mode: str = ""


class LanClient(BaseModel):
    hostname: str = ""
    ip: str = ""
    mac: str = ""
    interface: str = ""
    rssi: str = ""
    ssid: str = ""


def _decode_list(raw: str, model: Type[M]) -> List[M]:
    """Decode a JSON list stored in a text column; bad data yields an empty list."""
    if not raw:
        return []
    try:
        items: Any = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("cpe_bad_json_column", extra={"model": model.__name__})
        return []
    if not isinstance(items, list):
        return []
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError:
        logger.debug("cpe_bad_json_item", extra={"model": model.__name__})
        return []


class NetCpe(BaseModel):
    """CPE record as listed by ``/admin/cpe/query`` and ``/admin/cpe/get``."""

    id: int
    node_id: Optional[int] = None
    system_name: str = ""
    sn: str
    name: str = ""
    arch_name: str = ""
    software_version: str = ""
    hardware_version: str = ""
    model: str = ""
    oui: str = ""
    manufacturer: str = ""
    product_class: str = ""
    status: str = ""
    device_type: str = ""
    task_tags: str = ""
    uptime: int = 0
    memory_total: int = 0
    memory_free: int = 0
    cpu_usage: int = 0
    cwmp_status: str = ""
    cwmp_url: str = ""
    factoryreset_id: str = ""
    pon_sn_hex: str = ""
    fiber_rx_power: str = ""
    fiber_tx_power: str = ""
    olt_uplink: str = ""
    pon_mode: str = ""
    registration_id: str = ""
    wifi_ssid: str = ""
    wan_info: str = ""
    lan_clients: str = ""
    cwmp_last_inform: Optional[str] = None
    remark: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def online(self) -> bool:
        return self.cwmp_status == "online"

    def wifi_list(self) -> List[WifiItem]:
        return _decode_list(self.wifi_ssid, WifiItem)

    def wan_list(self) -> List[WanItem]:
        return _decode_list(self.wan_info, WanItem)

    def lan_client_list(self) -> List[LanClient]:
        return _decode_list(self.lan_clients, LanClient)


class CpeParam(BaseModel):
    id: Optional[Union[int, str]] = None
    sn: str = ""
    tag: str = ""
    name: str
    value: str = ""
    remark: str = ""
    writable: str = ""


class OdpCpe(BaseModel):
    id: int
    sn: str
    name: str = ""
    model: str = ""
    cwmp_status: str = ""
