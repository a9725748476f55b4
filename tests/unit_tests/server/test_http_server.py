"""Unit tests for the HTTP transport."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from image_converter.discovery.identity import identity_of
from image_converter.errors import RevealError

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


def _client() -> TestClient:
    pytest.importorskip("fastapi")
    pytest.importorskip("httpx")

    from fastapi.testclient import TestClient

    module = __import__("image_converter.server.http_server", fromlist=["create_app"])

    return TestClient(module.create_app())


def _items(image_tree: Path) -> list[dict[str, object]]:
    return [
        {
            "identity": identity_of(image_tree / "a.jpg"),
            "source_path": str(image_tree / "a.jpg"),
            "file_name": "a.jpg",
            "relative_dir_segments": [],
        },
        {
            "identity": identity_of(image_tree / "sub" / "b.png"),
            "source_path": str(image_tree / "sub" / "b.png"),
            "file_name": "b.png",
            "relative_dir_segments": ["sub"],
        },
    ]


def test_health_and_readiness() -> None:
    """Probe endpoints report static status."""
    client = _client()
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/readyz").json() == {"status": "ready"}


def test_discover_returns_records_and_counters(image_tree: Path) -> None:
    """Discovery responds with records and notice counters."""
    (image_tree / "fake.jpg").write_text("nope", encoding="utf-8")
    response = _client().post("/v1/discover", json={"paths": [str(image_tree)]})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["unsupported"] == 1
    assert body["duplicates"] == 0
    assert {record["file_name"] for record in body["records"]} == {"a.jpg", "b.png"}


def test_discover_rejects_empty_paths() -> None:
    """An empty path list fails request validation."""
    response = _client().post("/v1/discover", json={"paths": []})
    assert response.status_code == 422


def test_convert_and_check_existing(image_tree: Path, tmp_path: Path) -> None:
    """Converted items are later reported by the existence check."""
    client = _client()
    output_root = tmp_path / "out"
    items = _items(image_tree)

    response = client.post(
        "/v1/convert",
        json={
            "items": items,
            "options": {"format": "webp", "quality": 75, "output_root": str(output_root)},
        },
    )
    assert response.status_code == 200, response.text
    outputs = {Path(item["output_path"]) for item in response.json()}
    assert outputs == {output_root / "a.webp", output_root / "sub" / "b.webp"}

    response = client.post(
        "/v1/check-existing",
        json={"items": items, "output_root": str(output_root), "format": "webp"},
    )
    assert response.status_code == 200
    assert all(item["reused"] for item in response.json())
    assert len(response.json()) == 2


def test_convert_rejects_unsupported_format(image_tree: Path, tmp_path: Path) -> None:
    """Call-level validation errors map to 400."""
    response = _client().post(
        "/v1/convert",
        json={
            "items": _items(image_tree),
            "options": {"format": "gif", "quality": 75, "output_root": str(tmp_path)},
        },
    )
    assert response.status_code == 400
    assert "Invalid conversion options" in response.json()["detail"]


def test_convert_unexpected_error_is_500(
    monkeypatch: pytest.MonkeyPatch, image_tree: Path, tmp_path: Path
) -> None:
    """Unexpected failures are logged and hidden behind a generic 500."""
    import image_converter.server.http_server as module

    def boom(*args: object, **kwargs: object) -> object:
        raise RuntimeError("boom")

    monkeypatch.setattr(module, "convert", boom)
    response = _client().post(
        "/v1/convert",
        json={
            "items": _items(image_tree),
            "options": {"format": "webp", "quality": 75, "output_root": str(tmp_path)},
        },
    )
    assert response.status_code == 500
    assert response.json() == {"detail": "internal server error"}


def test_reveal_missing_path_is_404(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Reveal errors map to 404."""
    import image_converter.server.http_server as module

    def fake_reveal(path: str) -> None:
        raise RevealError(f"Output path does not exist: {path}")

    monkeypatch.setattr(module, "reveal_in_file_manager", fake_reveal)
    response = _client().post("/v1/reveal", json={"path": str(tmp_path / "missing")})
    assert response.status_code == 404


def test_reveal_success(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Reveal forwards the path to the file-manager launcher."""
    import image_converter.server.http_server as module

    seen: list[str] = []
    monkeypatch.setattr(module, "reveal_in_file_manager", seen.append)
    response = _client().post("/v1/reveal", json={"path": str(tmp_path)})
    assert response.status_code == 200
    assert seen == [str(tmp_path)]


def test_main_runs_uvicorn_with_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Entrypoint reads host/port defaults from the environment."""
    pytest.importorskip("fastapi")
    uvicorn = pytest.importorskip("uvicorn")
    import image_converter.server.http_server as module

    calls: dict[str, object] = {}

    def fake_run(app_ref: str, *, host: str, port: int, reload: bool) -> None:
        calls.update(app_ref=app_ref, host=host, port=port, reload=reload)

    monkeypatch.setattr(uvicorn, "run", fake_run)
    monkeypatch.setenv("CONVERTER_HTTP_HOST", "0.0.0.0")
    monkeypatch.setenv("CONVERTER_HTTP_PORT", "9999")
    monkeypatch.setattr(sys, "argv", ["image-converter-http"])

    module.main()

    assert calls == {
        "app_ref": "image_converter.server.http_server:app",
        "host": "0.0.0.0",
        "port": 9999,
        "reload": False,
    }


def test_missing_fastapi_raises_install_hint(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without FastAPI the factory explains how to install the extra."""
    pytest.importorskip("fastapi")
    import image_converter.server.http_server as module

    monkeypatch.setattr(module.importlib.util, "find_spec", lambda name: None)
    with pytest.raises(RuntimeError, match=r"\.\[server\]"):
        module.create_app()
