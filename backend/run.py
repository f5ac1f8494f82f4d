#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Defaults to the mock geocoding provider so local runs never call a paid API;
set GEOCODING_PROVIDER=google (with GOOGLE_MAPS_API_KEY) to use the real one.
"""
import os
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

os.environ.setdefault("GEOCODING_PROVIDER", "mock")

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting CareCompare search API at http://localhost:{port}")
    print(f"API docs: http://localhost:{port}/docs")

    uvicorn.run("carecompare.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
