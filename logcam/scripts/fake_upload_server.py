"""
Fake upload server for testing HttpUpload without the processing service.

Accepts multipart/form-data (meta + raw) on POST /upload-raw, stores the raw
bytes under uploads/ and answers {"ok": true, "message": "saved", "meta": ...}.
Converting the dump to DNG/TIFF is the real service's job, not this stub's.

Usage:
    python logcam/scripts/fake_upload_server.py
"""

import json
import os
import time
from pathlib import Path
import uvicorn
from fastapi import FastAPI, File, UploadFile
from fastapi.responses import JSONResponse

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "uploads"))

app = FastAPI(title="fake-upload-server")


@app.post("/upload-raw")
async def upload_raw(meta: UploadFile = File(...), raw: UploadFile = File(...)):
    try:
        info = json.loads(await meta.read())
        data = await raw.read()
        expected = int(info["width"]) * int(info["height"]) * 4
        if len(data) != expected:
            raise ValueError(f"raw part is {len(data)} bytes, meta says {expected}")

        UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
        out_path = UPLOAD_DIR / f"raw_saved_{int(time.time() * 1000)}.rgba"
        out_path.write_bytes(data)
        print(f"[upload] {raw.filename} -> {out_path} ({len(data)} bytes, {info.get('format')})")
        return {"ok": True, "message": "saved", "meta": info}
    except (ValueError, KeyError, TypeError) as e:
        print(f"[upload] rejected: {e}")
        return JSONResponse(status_code=500, content={"ok": False, "message": str(e)})


if __name__ == "__main__":
    print("Fake upload server starting on http://localhost:3000")
    uvicorn.run(app, host="0.0.0.0", port=3000)
