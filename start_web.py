#!/usr/bin/env python3
"""Serve the DepClash report API on port 8000."""

import uvicorn

if __name__ == "__main__":
    print("DepClash API: POST /api/report, GET /api/report/{root} on http://localhost:8000")

    uvicorn.run("apps.web.main:app", host="0.0.0.0", port=8000)
