#!/usr/bin/env python3
"""
Startup script for the GiftFinder API.
"""

import uvicorn

from giftfinder import config

if __name__ == "__main__":
    uvicorn.run(
        "giftfinder.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.APP_ENV == "development",
        log_level=config.LOG_LEVEL.lower()
    )
