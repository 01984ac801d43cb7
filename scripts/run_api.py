#!/usr/bin/env python3
"""
FastAPIサーバーを起動するエントリポイント

  HTTPFLOW_WORKFLOWS_DIR=./workflows python -m scripts.run_api
"""
import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=os.environ.get("HTTPFLOW_HOST", "127.0.0.1"),
        port=int(os.environ.get("HTTPFLOW_PORT", "8000")),
        reload=os.environ.get("HTTPFLOW_RELOAD", "") == "1",
    )
