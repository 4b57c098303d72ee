from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Any, Dict, List, Mapping

from acs_admin.client.api import FormData
from acs_admin.schemas.common import Envelope
from acs_admin.schemas.settings_schemas import ConfigItem, LogoInfo
from acs_admin.services.base_service import BaseService, build_form

logger = logging.getLogger(__name__)

LOGO_EXTENSIONS = {".png", ".jpg", ".jpeg", ".svg", ".webp"}
LOGO_MAX_BYTES = 2 * 1024 * 1024
# form keys the backend skips when saving a config group
RESERVED_KEYS = {"ctype", "submit"}


class SettingsService(BaseService):
    async def config_list(self) -> List[ConfigItem]:
        raw = await self._client.get("/admin/settings/configlist")
        return [ConfigItem.model_validate(item) for item in raw or []]

    async def query(self, ctype: str) -> Dict[str, str]:
        raw = await self._client.get(f"/admin/settings/{ctype}/query")
        return {str(key): "" if value is None else str(value) for key, value in (raw or {}).items()}

    async def update(self, ctype: str, values: Mapping[str, Any]) -> Envelope[Any]:
        clashes = RESERVED_KEYS.intersection(values)
        if clashes:
            raise ValueError(f"reserved setting names: {sorted(clashes)}")
        payload = {"ctype": ctype, **build_form(values)}
        logger.info("settings_update", extra={"ctype": ctype, "names": sorted(values)})
        raw = await self._client.post_form("/admin/settings/update", payload)
        return Envelope[Any].model_validate(raw)

    async def logo_info(self) -> LogoInfo:
        raw = await self._client.get("/admin/settings/logo/info")
        return LogoInfo.model_validate(raw)

    async def upload_logo(self, filename: str, content: bytes, content_type: str | None = None) -> Envelope[Any]:
        """Upload a custom logo as a pre-built multipart form."""
        ext = PurePath(filename).suffix.lower()
        if ext not in LOGO_EXTENSIONS:
            raise ValueError("Invalid file type. Use PNG, JPG, SVG, or WebP")
        if len(content) > LOGO_MAX_BYTES:
            raise ValueError("File too large. Max 2MB")
        form = FormData()
        form.append_file("logo", filename, content, content_type)
        raw = await self._client.post("/admin/settings/logo/upload", form)
        return Envelope[Any].model_validate(raw)
