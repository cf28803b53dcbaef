"""
Tests for the streaming STT adapter
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest

from speechrelay.services.gcp.speech import GCPSpeechService, STTConfig


def response(*results):
    return SimpleNamespace(results=list(results))


def result(transcript, is_final=False):
    return SimpleNamespace(alternatives=[SimpleNamespace(transcript=transcript)], is_final=is_final)


class FakeSpeechClient:
    """Replays canned responses; optionally fails after them."""

    def __init__(self, responses, error=None, consume_audio=False):
        self.responses = responses
        self.error = error
        self.consume_audio = consume_audio
        self.config = None
        self.audio = []

    def streaming_recognize(self, config, requests):
        self.config = config

        def generate():
            if self.consume_audio:
                self.audio = [r.audio_content for r in requests]
            yield from self.responses
            if self.error is not None:
                raise self.error

        return generate()


class Recorder:
    def __init__(self):
        self.data = []
        self.errors = []

    def on_data(self, transcript, is_final):
        self.data.append((transcript, is_final))

    def on_error(self, error):
        self.errors.append(error)


@pytest.fixture
def recorder():
    return Recorder()


def open_stream(client, recorder, config=None):
    service = GCPSpeechService(client=client, stream_timeout=None)
    return service.create_recognize_stream(config or STTConfig("en-US"), recorder.on_data, recorder.on_error)


def test_each_result_becomes_one_callback(recorder):
    client = FakeSpeechClient([
        response(result("hel")),
        response(result("hello wor")),
        response(result("Hello world.", is_final=True)),
    ])

    stream = open_stream(client, recorder)

    assert stream.wait(timeout=2)
    assert recorder.data == [("hel", False), ("hello wor", False), ("Hello world.", True)]
    assert recorder.errors == []


def test_events_without_results_are_dropped(recorder):
    client = FakeSpeechClient([
        response(result("good")),
        response(),
        response(SimpleNamespace(alternatives=[], is_final=False)),
        response(result("Good morning.", is_final=True)),
    ])

    stream = open_stream(client, recorder)

    assert stream.wait(timeout=2)
    assert recorder.data == [("good", False), ("Good morning.", True)]
    assert recorder.errors == []


def test_stream_error_reported_once(recorder):
    error = RuntimeError("stream reset")
    client = FakeSpeechClient([response(result("hi"))], error=error)

    stream = open_stream(client, recorder)

    assert stream.wait(timeout=2)
    assert recorder.data == [("hi", False)]
    assert recorder.errors == [error]
    assert stream.closed


def test_audio_written_until_end(recorder):
    client = FakeSpeechClient([response(result("ok", is_final=True))], consume_audio=True)

    stream = open_stream(client, recorder)
    assert stream.write(b"chunk-1")
    assert stream.write(b"chunk-2")
    stream.end()

    assert stream.wait(timeout=2)
    assert client.audio == [b"chunk-1", b"chunk-2"]
    assert stream.write(b"late") is False


def test_default_config(recorder):
    client = FakeSpeechClient([])

    open_stream(client, recorder).wait(timeout=2)

    assert client.config.interim_results is True
    assert client.config.config.language_code == "en-US"
    assert client.config.config.sample_rate_hertz == 48000
    assert client.config.config.enable_automatic_punctuation is True
    assert client.config.config.encoding.name == "WEBM_OPUS"


def test_linear16_config(recorder):
    client = FakeSpeechClient([])

    open_stream(client, recorder, STTConfig("de-DE", encoding="LINEAR16", sample_rate_hertz=16000)).wait(timeout=2)

    assert client.config.config.encoding.name == "LINEAR16"
    assert client.config.config.sample_rate_hertz == 16000


def test_unsupported_encoding_rejected():
    with pytest.raises(ValueError):
        STTConfig("en-US", encoding="FLAC")


def test_client_construction_failure_raises(recorder):
    service = GCPSpeechService()

    with patch("speechrelay.services.gcp.speech.speech.SpeechClient", side_effect=RuntimeError("no credentials")):
        with pytest.raises(RuntimeError, match="no credentials"):
            service.create_recognize_stream(STTConfig("en-US"), recorder.on_data, recorder.on_error)

    assert recorder.errors == []


def test_client_shared_across_streams(recorder):
    client = Mock()
    client.streaming_recognize.return_value = iter([])

    with patch("speechrelay.services.gcp.speech.speech.SpeechClient", return_value=client) as factory:
        service = GCPSpeechService(stream_timeout=None)
        service.create_recognize_stream(STTConfig("en-US"), recorder.on_data, recorder.on_error).wait(timeout=2)
        client.streaming_recognize.return_value = iter([])
        service.create_recognize_stream(STTConfig("en-US"), recorder.on_data, recorder.on_error).wait(timeout=2)

    assert factory.call_count == 1


def test_session_timeout_half_closes_stream(recorder):
    client = FakeSpeechClient([], consume_audio=True)
    service = GCPSpeechService(client=client, stream_timeout=0.05)

    stream = service.create_recognize_stream(STTConfig("en-US"), recorder.on_data, recorder.on_error)

    assert stream.wait(timeout=2)
    assert recorder.errors == []


async def test_callbacks_delivered_on_event_loop(recorder):
    loop_thread_calls = []

    async def on_final(transcript, is_final):
        loop_thread_calls.append((transcript, is_final, asyncio.get_running_loop() is loop))

    loop = asyncio.get_running_loop()
    client = FakeSpeechClient([response(result("a")), response(result("ab", is_final=True))])
    service = GCPSpeechService(client=client, stream_timeout=None)

    stream = service.create_recognize_stream(STTConfig("en-US"), on_final, recorder.on_error)
    assert await asyncio.to_thread(stream.wait, 2)
    await asyncio.sleep(0.05)

    assert loop_thread_calls == [("a", False, True), ("ab", True, True)]


async def test_failing_async_callback_is_logged(recorder, caplog):
    async def on_data(transcript, is_final):
        raise RuntimeError("subscriber went away")

    client = FakeSpeechClient([response(result("hello", is_final=True))])
    service = GCPSpeechService(client=client, stream_timeout=None)

    with caplog.at_level("ERROR", logger="speechrelay.services.gcp.speech"):
        stream = service.create_recognize_stream(STTConfig("en-US"), on_data, recorder.on_error)
        assert await asyncio.to_thread(stream.wait, 2)
        await asyncio.sleep(0.05)

    assert "Error in STT callback: subscriber went away" in caplog.text
    assert stream._callback_tasks == set()
    assert recorder.errors == []
