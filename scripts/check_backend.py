"""Run connectivity checks against the ACS admin backend.

Usage:
    python scripts/check_backend.py --base http://localhost:2979 --username admin --password secret

The script prints a concise status line for backend reachability, session
validity and the CSRF cookie.  Use ``--json`` to emit structured output that
can be consumed by CI pipelines.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Iterable


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from acs_admin.client.api import ApiClient  # noqa: E402  (import after sys.path)
from acs_admin.core.config import settings  # noqa: E402
from acs_admin.core.logging import setup_logging  # noqa: E402
from acs_admin.services.auth_service import AuthService, LoginFailed  # noqa: E402
from acs_admin.utils.backend_check import (  # noqa: E402
    BackendCheckResult,
    run_backend_checks,
)


def _format_line(result: BackendCheckResult) -> str:
    icons = {"ok": "✅", "failed": "❌", "skipped": "⚠️"}
    icon = icons.get(result.status, "?")
    return f"{icon} {result.name:<10} {result.detail}"


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verify ACS admin backend connectivity")
    parser.add_argument("--base", default=settings.ACS_BASE_URL, help="backend base URL")
    parser.add_argument("--username", help="log in with this operator before probing")
    parser.add_argument("--password", default="", help="operator password")
    parser.add_argument("--json", action="store_true", help="emit machine-readable JSON output")
    parser.add_argument("--log-level", default="warning", help="log level for diagnostics")
    return parser.parse_args(list(argv) if argv is not None else None)


async def _run(args: argparse.Namespace) -> int:
    async with ApiClient(base_url=args.base) as client:
        if args.username:
            try:
                await AuthService(client).login(args.username, args.password)
            except LoginFailed as exc:
                print(f"❌ login      {exc}")
                return 1
        results = await run_backend_checks(client)

    if args.json:
        payload = [result.as_dict() for result in results]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        for result in results:
            print(_format_line(result))

    failures = [r for r in results if r.status == "failed"]
    return 0 if not failures else 1


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(level=args.log_level)
    return asyncio.run(_run(args))


if __name__ == "__main__":  # pragma: no cover - manual script entrypoint
    raise SystemExit(main())
