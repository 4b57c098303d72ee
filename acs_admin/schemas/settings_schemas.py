from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ConfigItem(BaseModel):
    name: str
    title: str = ""
    icon: str = ""


class LogoInfo(BaseModel):
    exists: bool = False
    url: Optional[str] = None
