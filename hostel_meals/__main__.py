"""
本地启动入口：python -m hostel_meals
"""

import os

import uvicorn

from .app import configure_logging
from .config.settings import settings


if __name__ == "__main__":
    configure_logging(settings)
    uvicorn.run(
        "hostel_meals.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_level=settings.log_level.lower(),
    )
