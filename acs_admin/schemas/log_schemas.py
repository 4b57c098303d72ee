from __future__ import annotations

from typing import Union

from pydantic import BaseModel


class OprLog(BaseModel):
    """Operator audit entry from ``/admin/logging/query``."""
    id: Union[int, str]
    opr_name: str = ""
    opt_action: str = ""
    opr_ip: str = ""
    opt_desc: str = ""
    opt_time: str = ""
