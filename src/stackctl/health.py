"""
Health probe for the running stack: GET each endpoint the mode exposes.
A probe never raises; connection errors and timeouts become ok=False.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from stackctl.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthResult:
    label: str
    url: str
    ok: bool
    status_code: Optional[int] = None
    body: str = ""
    error: Optional[str] = None

    def render(self) -> str:
        """Response body when the endpoint answered, otherwise '<Label> not responding'."""
        if self.ok:
            return self.body
        return f"{self.label} not responding"


def check_endpoint(client: httpx.Client, label: str, url: str) -> HealthResult:
    """Any HTTP response counts as responding; transport errors and malformed URLs do not."""
    try:
        r = client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug("health probe %s %s failed: %s", label, url, e)
        return HealthResult(label=label, url=url, ok=False, error=str(e) or type(e).__name__)
    return HealthResult(label=label, url=url, ok=True, status_code=r.status_code, body=r.text)


def check_endpoints(settings: Settings, client: Optional[httpx.Client] = None) -> List[HealthResult]:
    """Probe every (label, url) in settings.health_urls, in order."""
    if client is not None:
        return [check_endpoint(client, label, url) for label, url in settings.health_urls]
    with httpx.Client(timeout=settings.health_timeout) as owned:
        return [check_endpoint(owned, label, url) for label, url in settings.health_urls]
