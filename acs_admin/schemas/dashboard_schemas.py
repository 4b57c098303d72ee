from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class CounterItem(BaseModel):
    name: str
    value: Optional[Union[int, float]] = None
    icon: str = ""


class DistItem(BaseModel):
    name: str
    count: int = 0


class DistResult(BaseModel):
    manufacturer: List[DistItem] = Field(default_factory=list)
    model: List[DistItem] = Field(default_factory=list)
    version: List[DistItem] = Field(default_factory=list)

    @field_validator("manufacturer", "model", "version", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return [] if value is None else value


class SysInfo(BaseModel):
    """Host and process statistics reported by ``/admin/sysstatus/data``."""

    hostname: str = ""
    os: str = ""
    uptime: int = 0
    cpu_usage: float = 0.0
    cpu_cores: int = 0
    mem_total: int = 0
    mem_used: int = 0
    mem_free: int = 0
    mem_used_percent: float = 0.0
    disk_total: int = 0
    disk_used: int = 0
    disk_free: int = 0
    disk_percent: float = 0.0
    process_mem: int = 0
    process_cpu: float = 0.0
    num_goroutine: int = 0
    go_version: str = ""
