from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SynthesizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    language_code: Optional[str] = Field(None, alias="languageCode")
    voice_name: Optional[str] = Field(None, alias="voiceName")
    ssml_gender: Optional[Literal["MALE", "FEMALE", "NEUTRAL", "SSML_VOICE_GENDER_UNSPECIFIED"]] = Field(
        None, alias="ssmlGender"
    )
