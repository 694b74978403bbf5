import uvicorn

from core.config import HOST, PORT, configure_logging
from web.api import app

if __name__ == "__main__":
    configure_logging()
    uvicorn.run(
        "web.api:app",
        host=HOST,
        port=PORT,
        reload=True,
    )
