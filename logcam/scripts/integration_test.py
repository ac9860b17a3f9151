"""
Integration run: walks a live logcam server through start, every export and stop.

Usage:
    # Mock camera + mock upload:
    CAMERA_ADAPTER=mock UPLOAD_ADAPTER=mock logcam
    python logcam/scripts/integration_test.py

    # Real upload path (run fake_upload_server.py first):
    python logcam/scripts/fake_upload_server.py              (terminal 1)
    CAMERA_ADAPTER=mock logcam                               (terminal 2)
    python logcam/scripts/integration_test.py                (terminal 3)
"""

import sys
import httpx

BASE = "http://localhost:8000"
TIMEOUT = 120.0

# (section, method, path, expected subset of the JSON body)
STEPS = [
    ("Health & Status", "GET", "/health", {"all_ok": True}),
    ("Health & Status", "GET", "/status", {}),
    ("Not started", "POST", "/capture/png", {"ok": False, "error_code": "SOURCE_UNAVAILABLE"}),
    ("Camera", "POST", "/start", {"ok": True}),
    ("Camera", "GET", "/status", {"state": "idle", "streaming": True}),
    ("Exports", "POST", "/capture/png", {"ok": True, "mode": "png"}),
    ("Exports", "POST", "/capture/log", {"ok": True, "mode": "log"}),
    ("Exports", "POST", "/capture/raw", {"ok": True, "mode": "raw"}),
    ("Stop", "POST", "/stop", {"ok": True}),
    ("Stop", "GET", "/status", {"state": "stopped"}),
]


def run_step(client: httpx.Client, method: str, path: str, expect: dict) -> tuple[bool, str]:
    """Returns (passed, detail)."""
    r = client.request(method, path)
    if r.status_code != 200:
        return False, f"HTTP {r.status_code}"
    data = r.json()
    wrong = {k: data.get(k) for k, v in expect.items() if data.get(k) != v}
    if wrong:
        return False, f"expected {expect}, got {wrong}"
    return True, str(data.get("message", ""))


def main():
    print(f"\nIntegration run against {BASE}")
    results = []
    section = None
    with httpx.Client(base_url=BASE, timeout=TIMEOUT) as client:
        for sec, method, path, expect in STEPS:
            if sec != section:
                section = sec
                print(f"\n--- {section} ---")
            try:
                ok, detail = run_step(client, method, path, expect)
            except httpx.ConnectError:
                ok, detail = False, "connection refused (is the server running?)"
            except httpx.HTTPError as e:
                ok, detail = False, f"{type(e).__name__}: {e}"
            print(f"  {'OK  ' if ok else 'FAIL'}  {method} {path}  {detail}")
            results.append(ok)

    failed = results.count(False)
    print(f"\n{len(results) - failed}/{len(results)} steps passed\n")
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
