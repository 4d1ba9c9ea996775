from fastapi import APIRouter

from backend.fastapi.core.init_settings import global_settings

router = APIRouter()


@router.get("/", summary="Service Info")
async def root():
    return {
        "name": global_settings.APP_NAME,
        "version": global_settings.APP_VERSION,
        "docs": "/docs"
    }


@router.get("/health", summary="Health Check")
async def health():
    return {"status": "ok"}
