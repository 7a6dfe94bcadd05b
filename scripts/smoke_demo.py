from __future__ import annotations

import argparse
import json
import time
import urllib.error
import urllib.request
from typing import Any


def request_json(url: str, method: str = "GET", payload: dict[str, Any] | None = None) -> Any:
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    req = urllib.request.Request(url, data=data, method=method)
    if data is not None:
        req.add_header("Content-Type", "application/json")
    with urllib.request.urlopen(req, timeout=10) as resp:
        return json.loads(resp.read().decode("utf-8"))


def wait_for(url: str, timeout: int) -> None:
    deadline = time.time() + timeout
    last_error: Exception | None = None
    while time.time() < deadline:
        try:
            with urllib.request.urlopen(url, timeout=10) as resp:
                if resp.status == 200:
                    return
        except (urllib.error.URLError, OSError) as exc:
            last_error = exc
        time.sleep(1)
    raise RuntimeError(f"Timed out waiting for {url}: {last_error}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Smoke test for a running editor server.")
    parser.add_argument("--editor", default="http://localhost:8080")
    parser.add_argument("--timeout", type=int, default=60)
    args = parser.parse_args()

    base = args.editor.rstrip("/")
    wait_for(f"{base}/", args.timeout)

    scene = request_json(f"{base}/api/scene")
    if not scene.get("drawables"):
        raise RuntimeError("Scene has no drawable layers")
    if not scene["drawables"][0]["path"]["path_data"].startswith("M "):
        raise RuntimeError("Path data does not start with a move command")

    layer_id = scene["active_layer_id"]
    moved = request_json(
        f"{base}/api/layers/{layer_id}", method="PATCH", payload={"text": "Smoke", "x": 12.5}
    )
    if moved["layers"][0]["x"] != 12.5:
        raise RuntimeError("Layer patch was not applied")

    zoomed = request_json(f"{base}/api/view/zoom-in", method="POST")
    if zoomed["auto_fit"]:
        raise RuntimeError("Zoom did not disable auto-fit")
    request_json(f"{base}/api/view/auto-fit", method="POST")

    print("Smoke test passed.")


if __name__ == "__main__":
    main()
