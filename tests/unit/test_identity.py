import threading

import pytest

from gsa_response.config import ServiceSettings
from gsa_response.identity import version_identity


@pytest.fixture(autouse=True)
def _fresh_identity():
    version_identity.cache_clear()
    yield
    version_identity.cache_clear()


def test_identity_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GSA_RELEASE_NAME", "gsa-response-9.9")
    monkeypatch.setenv("GSA_NODE_ID", "node-abc")

    assert version_identity() == "gsa-response-9.9/node-abc"


def test_identity_is_computed_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GSA_NODE_ID", "first")
    first = version_identity()
    monkeypatch.setenv("GSA_NODE_ID", "second")

    assert version_identity() == first
    assert first.endswith("/first")


def test_concurrent_first_use_agrees(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GSA_NODE_ID", "shared")
    results: list[str] = []
    threads = [threading.Thread(target=lambda: results.append(version_identity())) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert set(results) == {f"{ServiceSettings().release_name}/shared"}


def test_default_node_id_is_stable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GSA_NODE_ID", raising=False)

    first = ServiceSettings.from_env().node_id
    second = ServiceSettings.from_env().node_id

    assert first == second
    assert len(first) == 12
