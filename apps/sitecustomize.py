"""Early bootstrapping when `apps/` is on `sys.path`.

Imported automatically by Python at startup if found on `sys.path` (see the
`site` module). Loads `.env` (package-local first, then repo root) once,
guarded by `STUDYBUDDY_ENV_LOADED`.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


def _load_env_once() -> None:
    if os.environ.get("STUDYBUDDY_ENV_LOADED") == "1":
        return

    apps_dir = Path(__file__).resolve().parent
    pkg_env = apps_dir / "studybuddy" / ".env"
    root_env = apps_dir.parent / ".env"

    if pkg_env.exists():
        load_dotenv(pkg_env)
    elif root_env.exists():
        load_dotenv(root_env)
    os.environ["STUDYBUDDY_ENV_LOADED"] = "1"


_load_env_once()
