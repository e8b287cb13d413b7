#!/usr/bin/env python3
"""
Workpace server launcher script.

Starts uvicorn on the package application; reload watches the package
directory only.
"""

import os

if __name__ == "__main__":
    import uvicorn

    package_dir = os.path.dirname(os.path.abspath(__file__))
    uvicorn.run(
        "workpace.api:app",
        host=os.environ.get("WORKPACE_HOST", "127.0.0.1"),
        port=int(os.environ.get("WORKPACE_PORT", "8000")),
        reload=True,
        reload_dirs=[package_dir],
    )
