"""
Chart Asset Service Entry Point

Run with:
  uvicorn main:app --host 0.0.0.0 --port $PORT
"""

import logging

from assetsvc.app import create_app
from assetsvc.config import Settings

settings = Settings.from_env()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(settings)


# For local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.host, port=settings.port)
