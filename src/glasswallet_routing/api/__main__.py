"""Run with: python -m glasswallet_routing.api"""

import uvicorn
from .main import create_app
from .config import settings

if __name__ == "__main__":
    app = create_app()
    uvicorn.run(app, host=settings.host, port=settings.port)
