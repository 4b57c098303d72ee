"""Pydantic schemas for backend responses and request bodies."""

from .common import CommandFailed, Envelope, IdName, Page, TypeOption  # noqa: F401
from .cpe_schemas import CpeParam, LanClient, NetCpe, OdpCpe, WanItem, WifiItem  # noqa: F401
from .dashboard_schemas import CounterItem, DistItem, DistResult, SysInfo  # noqa: F401
from .log_schemas import OprLog  # noqa: F401
from .olt_schemas import (  # noqa: F401
    OdcDevice,
    OdpDevice,
    OltCreate,
    OltDevice,
    OltOnuData,
    OltUpdate,
    OnuLookup,
)
from .settings_schemas import ConfigItem, LogoInfo  # noqa: F401
