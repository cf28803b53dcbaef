"""
Tests for the Google Cloud Translation engine
"""
import logging
from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest

from speechrelay.services.exceptions import ProviderError
from speechrelay.services.translation import GoogleTranslateEngine, TranslationRequest
from speechrelay.services.translation.google_engine import resolve_translation_location


def translate_response(*texts):
    return SimpleNamespace(translations=[SimpleNamespace(translated_text=t) for t in texts])


@pytest.fixture
def client():
    client = Mock()
    client.translate_text.return_value = translate_response("Good morning")
    return client


async def test_translate_sends_trimmed_text(test_settings, client):
    engine = GoogleTranslateEngine(test_settings, client=client)

    result = await engine.translate(TranslationRequest("  Guten Morgen  ", "de", "en"))

    assert result == "Good morning"
    client.translate_text.assert_called_once_with(request={
        "parent": "projects/test-project/locations/global",
        "contents": ["Guten Morgen"],
        "mime_type": "text/plain",
        "source_language_code": "de",
        "target_language_code": "en",
    })


@pytest.mark.parametrize("text", ["", "   ", "\n"])
async def test_blank_text_returned_without_call(test_settings, client, text):
    engine = GoogleTranslateEngine(test_settings, client=client)

    assert await engine.translate(TranslationRequest(text, "de", "en")) == text
    client.translate_text.assert_not_called()


async def test_empty_response_raises(test_settings, client):
    client.translate_text.return_value = translate_response()
    engine = GoogleTranslateEngine(test_settings, client=client)

    with pytest.raises(ProviderError, match="No translation returned"):
        await engine.translate(TranslationRequest("Hallo", "de", "en"))


async def test_library_error_propagates_unmodified(test_settings, client):
    error = RuntimeError("403 PERMISSION_DENIED")
    client.translate_text.side_effect = error
    engine = GoogleTranslateEngine(test_settings, client=client)

    with pytest.raises(RuntimeError) as exc_info:
        await engine.translate(TranslationRequest("Hallo", "de", "en"))

    assert exc_info.value is error
    assert client.translate_text.call_count == 1


def test_availability_depends_on_project_id(test_settings):
    assert GoogleTranslateEngine(test_settings).is_available() is True

    config = test_settings.model_copy(update={"GOOGLE_CLOUD_PROJECT_ID": None})
    assert GoogleTranslateEngine(config).is_available() is False


def test_supported_location_is_kept(test_settings):
    config = test_settings.model_copy(update={"GOOGLE_CLOUD_TRANSLATE_LOCATION": " us-central1 "})
    assert GoogleTranslateEngine(config).location == "us-central1"


def test_generic_location_used_when_translate_location_unset(test_settings):
    config = test_settings.model_copy(update={
        "GOOGLE_CLOUD_TRANSLATE_LOCATION": None,
        "GOOGLE_CLOUD_LOCATION": "us-central1",
    })
    assert GoogleTranslateEngine(config).location == "us-central1"


def test_unsupported_location_falls_back_to_global(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_translation_location("asia-east2") == "global"

    assert "asia-east2" in caplog.text


def test_unset_location_defaults_to_global():
    assert resolve_translation_location(None) == "global"


async def test_metadata(test_settings):
    engine = GoogleTranslateEngine(test_settings)

    assert engine.get_name() == "Google Cloud Translation"
    assert engine.estimate_cost("hello", "en", "de") == pytest.approx(0.0001)
    assert {"code": "nl", "name": "Dutch"} in await engine.get_supported_languages()


async def test_initialize_uses_configured_credentials(test_settings):
    config = test_settings.model_copy(update={"GOOGLE_APPLICATION_CREDENTIALS": "/secrets/relay-sa.json"})
    engine = GoogleTranslateEngine(config)

    with patch("speechrelay.services.translation.google_engine.ensure_credentials") as ensure, \
            patch("speechrelay.services.translation.google_engine.translate.TranslationServiceClient") as client_cls:
        await engine.initialize()
        await engine.initialize()

    ensure.assert_called_once_with("/secrets/relay-sa.json")
    client_cls.assert_called_once_with()
