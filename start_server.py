#!/usr/bin/env python3
"""Run the API with uvicorn on the port given by the PORT environment variable."""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "nearest_centers.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
