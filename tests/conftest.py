"""Shared fixtures: an in-memory connection and a small on-disk project."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from uplift.core.config import UpliftConfig
from uplift.core.exceptions import TransportError

META_NS = "http://soap.sforce.com/2006/04/metadata"

LWC_META = """<?xml version="1.0" encoding="UTF-8"?>
<LightningComponentBundle xmlns="http://soap.sforce.com/2006/04/metadata">
    <apiVersion>62.0</apiVersion>
    <isExposed>true</isExposed>
</LightningComponentBundle>
"""


def make_response(name: str, description: str = "d", score: float = 0.9, kind: str = "LightningComponentBundle") -> dict:
    return {
        "metadata": {"durationMs": 12, "failureCount": 0, "successCount": 1, "timestamp": "2026-01-01T00:00:00Z"},
        "results": [{
            "resourceId": f"id-{name}",
            "resourceName": name,
            "metadataType": kind,
            "modelUsed": "test-model",
            "description": description,
            "descriptionScore": score,
        }],
    }


class FakeConnection:
    """Records every call; responds per resource name.

    ``responder`` receives the resource name and returns a payload or
    raises.  Names listed in ``fail`` raise ``TransportError``.
    """

    def __init__(self, responder: Optional[Callable[[str], Any]] = None, fail: tuple = ()):
        self.calls: list[tuple[str, dict]] = []
        self._responder = responder or (lambda name: make_response(name))
        self._fail = set(fail)

    @property
    def requested_names(self) -> list[str]:
        return [body["contentBundles"][0]["resourceName"] for _path, body in self.calls]

    async def post_json(self, path: str, body: dict) -> Any:
        self.calls.append((path, body))
        name = body["contentBundles"][0]["resourceName"]
        if name in self._fail:
            raise TransportError("HTTP 500: boom", status_code=500)
        return self._responder(name)


def write_lwc(project: Path, name: str, meta: Optional[str] = LWC_META, files: Optional[dict] = None) -> Path:
    """Create ``force-app/main/default/lwc/<name>`` with a JS and HTML file."""
    bundle = project / "force-app" / "main" / "default" / "lwc" / name
    bundle.mkdir(parents=True, exist_ok=True)
    files = files if files is not None else {
        f"{name}.js": "export default class {}",
        f"{name}.html": "<template></template>",
    }
    for filename, content in files.items():
        (bundle / filename).write_text(content, encoding="utf-8")
    if meta is not None:
        (bundle / f"{name}.js-meta.xml").write_text(meta, encoding="utf-8")
    return bundle


def write_apex_class(project: Path, name: str) -> Path:
    classes = project / "force-app" / "main" / "default" / "classes"
    classes.mkdir(parents=True, exist_ok=True)
    (classes / f"{name}.cls").write_text(f"public class {name} {{}}", encoding="utf-8")
    (classes / f"{name}.cls-meta.xml").write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n<ApexClass xmlns="%s"/>\n' % META_NS, encoding="utf-8"
    )
    return classes / f"{name}.cls"


@pytest.fixture
def config() -> UpliftConfig:
    return UpliftConfig(enable_progress_bar=False)


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()
