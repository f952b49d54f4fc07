"""Entry point for running the HTTP API as a module.

Usage:
    uv run python -m av_boq.api
"""

import os

import uvicorn

from av_boq.api.app import app

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
