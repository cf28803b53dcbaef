from fastapi import APIRouter

from speechrelay.api import translation, tts

router = APIRouter()
router.include_router(tts.router)
router.include_router(translation.router)

__all__ = ["router"]
