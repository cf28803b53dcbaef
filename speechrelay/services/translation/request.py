from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TranslationRequest:
    """
    One translate call.

    Attributes:
        text: Text to translate (callers trim it for cost control)
        source_lang: Source language code (e.g., "en")
        target_lang: Target language code (e.g., "de")
        context: Optional free-text hint from the surrounding conversation
    """
    text: str
    source_lang: str
    target_lang: str
    context: Optional[str] = None
