from typing import Optional, Dict, Any
from fastapi.testclient import TestClient

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

def api_call(
    client: TestClient,
    method: str,
    path: str,
    headers: Optional[Dict[str, str]] = None,
    json: Optional[Dict[str, Any]] = None,
    data: Optional[Dict[str, Any]] = None,
    files: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
    expected_min: int = 200,
    expected_max: int = 300,
):
    response = client.request(method, path, headers=headers, json=json, data=data, files=files, params=params)
    ok = expected_min <= response.status_code < expected_max
    try:
        body = response.json()
    except ValueError:
        body = response.text
    assert ok, f"{method} {path} => {response.status_code}, body={body}, json={json}, data={data}"
    return response

def image_upload(name: str = "cover.png", content: bytes = PNG_BYTES, content_type: str = "image/png") -> Dict[str, Any]:
    return {"file": (name, content, content_type)}

def assert_error(response, status_code: int, code: str):
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["error"]["code"] == code, body
    assert body["path"]
    assert body["timestamp"]
