from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class OltDevice(BaseModel):
    id: int
    name: str = ""
    ip_address: str = ""
    snmp_port: int = 161
    snmp_community: str = ""
    manufacturer: str = ""
    model: str = ""
    status: str = ""
    sys_name: str = ""
    sys_descr: str = ""
    sys_uptime: str = ""
    last_poll_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class OltCreate(BaseModel):
    """JSON body for ``/admin/olt/add``; the backend fills in defaults."""
    name: str
    ip_address: str
    snmp_port: int = 161
    snmp_community: str = "public"
    manufacturer: str = "ZTE"
    model: str = "C620"


class OltUpdate(BaseModel):
    # the backend binds id with a string tag
    id: str
    name: str
    ip_address: str
    snmp_port: int = 161
    snmp_community: str = "public"
    model: str = "C620"


class OltOnuData(BaseModel):
    id: int
    olt_id: int
    serial_number: str = ""
    pon_port: str = ""
    onu_id: int = 0
    onu_name: str = ""
    onu_type: str = ""
    phase_state: str = ""
    rx_power: float = 0.0
    online_time: str = ""
    offline_time: str = ""
    if_index: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class OnuLookup(BaseModel):
    found: bool = False
    onu: Optional[OltOnuData] = None
    olt_name: str = ""
    olt_ip: str = ""
    olt_model: str = ""
    sys_name: str = ""


class OdcDevice(BaseModel):
    id: int
    name: str = ""
    location: str = ""
    address: str = ""
    latitude: str = ""
    longitude: str = ""
    capacity: int = 0
    olt_id: int = 0
    pon_port: str = ""
    remark: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class OdpDevice(BaseModel):
    id: int
    name: str = ""
    odc_id: int = 0
    location: str = ""
    address: str = ""
    latitude: str = ""
    longitude: str = ""
    capacity: int = 0
    used_ports: int = Field(0, ge=0)
    remark: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
