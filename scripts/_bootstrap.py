from __future__ import annotations

import sys
from pathlib import Path


def bootstrap() -> None:
    """Add `apps/` to sys.path and import sitecustomize for env setup.

    Lets scripts run from a checkout without `pip install -e .`.
    """
    repo_root = Path(__file__).resolve().parents[1]
    apps_dir = repo_root / "apps"
    if str(apps_dir) not in sys.path:
        sys.path.insert(0, str(apps_dir))

    import sitecustomize  # noqa: F401
