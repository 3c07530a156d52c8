"""Process-wide identity of the serving node."""

from __future__ import annotations

from functools import cache

from gsa_response.config import ServiceSettings


@cache
def version_identity() -> str:
    """Return `<release>/<node id>`, computed once per process.

    Two threads racing on the first call compute the same value.
    """
    settings = ServiceSettings.from_env()
    return f"{settings.release_name}/{settings.node_id}"
