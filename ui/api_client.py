import os
from typing import Any, Dict, Optional

import requests

API_URL = os.getenv("API_URL", "http://localhost:3001")


def _friendly_message(default: str, resp: requests.Response) -> str:
    try:
        data = resp.json()
        return data.get("error") or data.get("detail") or default
    except ValueError:
        return default


def get(path: str, params: Optional[Dict[str, Any]] = None) -> Any:
    url = f"{API_URL}{path}"
    resp = requests.get(url, params=params, timeout=10)
    if resp.ok:
        return resp.json()
    raise RuntimeError(_friendly_message("Request failed", resp))


def get_bytes(path: str) -> bytes:
    url = f"{API_URL}{path}"
    resp = requests.get(url, timeout=30)
    if resp.ok:
        return resp.content
    raise RuntimeError(_friendly_message("Download failed", resp))


def post(path: str, payload: Dict[str, Any]) -> Any:
    url = f"{API_URL}{path}"
    resp = requests.post(url, json=payload, timeout=30)
    if resp.ok:
        return resp.json()
    raise RuntimeError(_friendly_message("Request failed", resp))


def fetch_snapshot() -> Dict[str, Any]:
    return get("/api/data")


def save_snapshot(snapshot: Dict[str, Any]) -> str:
    payload = {
        "products": snapshot.get("products"),
        "resources": snapshot.get("resources"),
        "consumption": snapshot.get("consumption"),
    }
    return post("/api/save", payload)["message"]


def download_snapshot_excel() -> bytes:
    return get_bytes("/api/data/excel")
