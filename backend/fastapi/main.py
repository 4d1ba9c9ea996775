import logging
from fastapi import FastAPI

from backend.fastapi.core.init_settings import global_settings
from backend.fastapi.core.lifespan import lifespan
from backend.fastapi.core.middleware import setup_cors
from backend.fastapi.core.routers import setup_routers

logging.basicConfig(
    level=global_settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

app = FastAPI(
    title=global_settings.APP_NAME,
    version=global_settings.APP_VERSION,
    description="Multi-branch car wash operations: wash records, washer credits and revenue reports",
    lifespan=lifespan
)

setup_cors(app)
setup_routers(app)
