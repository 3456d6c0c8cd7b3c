#!/usr/bin/env python
"""Script to run the taskshare backend server."""
import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "taskshare.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        reload=os.getenv("RELOAD", "1") == "1",
    )
