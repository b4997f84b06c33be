import os

import uvicorn

from ampere.core.app import app  # noqa: F401
from ampere.core.config import settings

if __name__ == "__main__":
    PORT = os.getenv("PORT", settings.PORT)
    reload = settings.APP_ENV == "development"
    uvicorn.run("ampere.core.app:app", host="127.0.0.1", port=int(PORT), reload=reload)
