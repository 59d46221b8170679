#!/usr/bin/env python
"""
Entry point for running the Week Planner API server
"""

import uvicorn

from weekplanner_api.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "weekplanner_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        reload_dirs=["./src"],
    )
