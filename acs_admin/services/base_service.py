from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from acs_admin.client.api import ApiClient
from acs_admin.schemas.common import Envelope


def form_value(value: Any) -> str:
    """Render a Python value the way the backend's form reader expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_form(values: Mapping[str, Any]) -> Dict[str, str]:
    """Drop unset fields and stringify the rest."""
    return {key: form_value(value) for key, value in values.items() if value is not None}


class BaseService:
    """Shared plumbing for endpoint wrappers composed over an ``ApiClient``."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def _command(self, path: str, values: Mapping[str, Any]) -> Envelope[Any]:
        raw = await self._client.post_form(path, build_form(values))
        return Envelope[Any].model_validate(raw)

    async def _json_command(self, path: str, body: Optional[Mapping[str, Any]] = None) -> Envelope[Any]:
        raw = await self._client.post(path, body)
        return Envelope[Any].model_validate(raw)
