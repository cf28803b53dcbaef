import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from speechrelay.api.deps import get_tts_cache
from speechrelay.schemas.tts import SynthesizeRequest
from speechrelay.services.tts_cache import TTSCache, TTSOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tts", tags=["tts"])


@router.post("/synthesize")
async def synthesize(payload: SynthesizeRequest, tts_cache: TTSCache = Depends(get_tts_cache)):
    """Synthesize text to speech (MP3), served from the TTS cache when possible."""
    if not payload.text or not payload.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    if not payload.language_code:
        raise HTTPException(status_code=400, detail="Language code is required")

    options = TTSOptions(
        text=payload.text,
        language_code=payload.language_code,
        voice_name=payload.voice_name,
        ssml_gender=payload.ssml_gender,
    )

    try:
        audio = await tts_cache.synthesize(options)
    except Exception as e:
        logger.error(f"TTS route error: {e}")
        raise HTTPException(status_code=500, detail="Failed to synthesize speech")

    return Response(content=audio, media_type="audio/mpeg")
