# Ensure src/ is at sys.path[0] when pytest runs from a checkout without an install
import sys
from pathlib import Path
from typing import Iterator

import pytest


_src = Path(__file__).resolve().parent.parent / "src"
_str_src = str(_src)
if _str_src not in sys.path:
    sys.path.insert(0, _str_src)

_STACKCTL_ENV = (
    "MODE", "SERVICE", "ARGS", "DEV_COMPOSE", "PROD_COMPOSE", "COMPOSE_PROJECT",
    "MONGO_USER", "MONGO_PASSWORD", "MONGO_PORT", "BACKEND_DIR", "BACKUPS_DIR",
    "GATEWAY_HEALTH_URL", "BACKEND_HEALTH_URL", "HEALTH_TIMEOUT", "LOG_LEVEL",
    "STACKCTL_DRY_RUN",
)


@pytest.fixture(autouse=True)
def _clean_stackctl_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Tests see defaults unless they set env vars themselves."""
    from stackctl.core.config import get_settings

    for name in _STACKCTL_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
