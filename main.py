"""
Nearby POI Finder Backend
=========================
Entry point. Run with: uvicorn main:app --reload

Startup loads the fuel-station and parking-lot snapshots from
``points_of_interest``; run ``alembic upgrade head`` and ``python seed.py``
first on a fresh database.
"""

import uvicorn

from poifinder.api.app import create_app
from poifinder.config import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.api_host, port=settings.api_port)
