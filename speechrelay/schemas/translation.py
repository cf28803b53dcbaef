from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EngineInfo(BaseModel):
    id: str
    name: str


class EnginePreferenceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    engine_id: str = Field(..., alias="engineId", min_length=1)


class TranslateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    source_lang: str = Field(..., alias="sourceLang")
    target_lang: str = Field(..., alias="targetLang")
    context: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")


class TranslateResponse(BaseModel):
    translation: str
    engine: str
