import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from speechrelay.api.deps import get_translation_registry
from speechrelay.schemas.translation import (
    EngineInfo,
    EnginePreferenceRequest,
    TranslateRequest,
    TranslateResponse,
)
from speechrelay.services.exceptions import NoEngineAvailableError
from speechrelay.services.translation.registry import TranslationEngineRegistry
from speechrelay.services.translation.request import TranslationRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translation", tags=["translation"])


@router.get("/engines", response_model=List[EngineInfo])
async def list_engines(registry: TranslationEngineRegistry = Depends(get_translation_registry)):
    return registry.get_available_engines()


@router.put("/preference", status_code=status.HTTP_204_NO_CONTENT)
async def set_preference(
    payload: EnginePreferenceRequest,
    registry: TranslationEngineRegistry = Depends(get_translation_registry),
):
    if not registry.has_engine(payload.engine_id):
        raise HTTPException(status_code=404, detail="Unknown translation engine")
    registry.set_user_preference(payload.user_id, payload.engine_id)


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    payload: TranslateRequest,
    registry: TranslationEngineRegistry = Depends(get_translation_registry),
):
    try:
        engine = registry.get_engine(payload.user_id)
    except NoEngineAvailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    request = TranslationRequest(
        text=payload.text,
        source_lang=payload.source_lang,
        target_lang=payload.target_lang,
        context=payload.context,
    )

    try:
        translation = await engine.translate(request)
    except Exception as e:
        logger.error(f"Translation failed via {engine.get_name()}: {e}")
        raise HTTPException(status_code=502, detail="Translation provider failed")

    return TranslateResponse(translation=translation, engine=engine.get_name())
