from __future__ import annotations

import base64

from fastapi.testclient import TestClient

import bannerkit.server as server


client = TestClient(server.app)


def _images(png):
    encoded = base64.b64encode(png()).decode("ascii")
    return {"1:2": encoded, "1:3": f"data:image/png;base64,{encoded}"}


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_preview_returns_interactive_document(payload, png):
    resp = client.post("/api/preview", json={"banner": payload(), "images": _images(png)})
    assert resp.status_code == 200
    assert "case 'SEEK'" in resp.json()["html"]


def test_preview_without_assets_is_422(payload):
    resp = client.post("/api/preview", json={"banner": payload(assets=[]), "images": {}})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "No assets to preview."


def test_bad_base64_is_422(payload):
    resp = client.post("/api/preview", json={"banner": payload(), "images": {"1:2": "***"}})
    assert resp.status_code == 422
    assert "1:2" in resp.json()["detail"]


def test_unknown_style_is_rejected(payload):
    data = payload()
    data["settings"][0]["in"]["style"] = "bounce-in"
    resp = client.post("/api/preview", json={"banner": data, "images": {}})
    assert resp.status_code == 422


def test_export(payload, png):
    resp = client.post("/api/export", json={"banner": payload(exportPreset="sizmek"), "images": _images(png)})
    assert resp.status_code == 200
    body = resp.json()
    assert body["preset"] == "sizmek"
    assert body["image_paths"] == ["images/Headline-0.png", "images/Logo-1.png"]
    assert '"adParameters": {}' in body["manifest"]
    assert "EB.clickthrough()" in body["html"]


def test_unexpected_export_error_is_500(monkeypatch, payload):
    def _boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(server, "export_banner", _boom)
    resp = client.post("/api/export", json={"banner": payload(), "images": {}})
    assert resp.status_code == 500
    assert "boom" in resp.json()["detail"]


def test_batch_export(payload, png):
    resp = client.post(
        "/api/export/batch",
        json={
            "items": [
                {"banner": payload(), "images": _images(png)},
                {"banner": payload(frameName="Empty", assets=[]), "images": {}},
            ]
        },
    )
    assert resp.status_code == 200
    items = resp.json()["items"]
    assert [i["ok"] for i in items] == [True, False]
    assert items[0]["export"]["manifest"] is not None
    assert items[1]["error"] == 'Banner #1 (Empty): Banner "Empty" has no assets to export.'


def test_empty_batch_is_422():
    resp = client.post("/api/export/batch", json={"items": []})
    assert resp.status_code == 422


def test_sample(payload):
    resp = client.post("/api/sample", json={"banner": payload(), "time": 500})
    assert resp.status_code == 200
    poses = resp.json()["poses"]
    assert poses["1:2"]["opacity"] == 0.5
    assert poses["1:2"]["scaleX"] == 1
    assert poses["1:3"] == {"opacity": 1, "x": 200, "y": 180, "scaleX": 1, "scaleY": 1, "rotation": 0}


def test_manifest(payload):
    resp = client.post("/api/manifest", json={"banner": payload(exportPreset="xandr")})
    assert resp.json() == {"preset": "xandr", "manifest": None}
    resp = client.post("/api/manifest", json={"banner": payload()})
    assert resp.json()["manifest"]["width"] == "300"


def test_validate_assets():
    resp = client.post(
        "/api/assets/validate",
        json={
            "assets": [
                {"id": "1:2", "name": "Ok", "width": 10, "height": 10},
                {"id": "1:3", "name": "Line", "type": "CONNECTOR", "width": 10, "height": 10},
            ]
        },
    )
    body = resp.json()
    assert body["valid"] is False
    assert body["issues"] == [
        {"asset_id": "1:3", "name": "Line", "error": "Connector elements cannot be exported"}
    ]


def test_export_reports_scale_and_size(payload, png):
    resp = client.post("/api/export", json={"banner": payload(), "images": _images(png), "optimize": False})
    body = resp.json()
    assert body["export_scale"] == 1.5
    assert body["total_bytes"] > len(body["html"])
    assert "\n" not in body["html"]


def test_weights(payload, png):
    resp = client.post("/api/weights", json={"banner": payload(), "images": _images(png)})
    assert resp.status_code == 200
    body = resp.json()
    assert [w["asset_id"] for w in body["weights"]] == ["1:2", "1:3"]
    assert body["optimized_total"] == sum(w["optimized"] for w in body["weights"])
    assert body["unoptimized_total"] == sum(w["unoptimized"] for w in body["weights"])


def test_weights_with_unreadable_image_is_422(payload):
    encoded = base64.b64encode(b"not a png").decode("ascii")
    resp = client.post("/api/weights", json={"banner": payload(), "images": {"1:2": encoded}})
    assert resp.status_code == 422
    assert "unreadable image" in resp.json()["detail"]
