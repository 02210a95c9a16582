"""Connection protocol: the one remote operation the pipeline needs."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """An authenticated connection able to POST JSON and return JSON.

    Implementations must be safe to share between concurrent requests.
    Failures should raise; ``TransportError`` is preferred so the
    dispatcher can report the HTTP status.
    """

    async def post_json(self, path: str, body: dict[str, Any]) -> Any: ...
