"""
GCP Speech Service

Adapts Google Cloud Speech-to-Text streaming recognition to a callback
contract: every provider response carrying a result becomes one
``on_data(transcript, is_final)`` call, and a stream failure becomes exactly
one ``on_error(error)`` call.

The Google client is blocking, so each stream is pumped by its own worker
thread. When a stream is opened from a running event loop, callbacks are
handed back to that loop in provider order.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from queue import Queue
from typing import Any, Callable, Iterator, Optional, Set

from google.cloud import speech

from speechrelay.config.constants import (
    STT_ENCODINGS,
    STT_DEFAULT_ENCODING,
    STT_DEFAULT_SAMPLE_RATE,
    STT_STREAM_TIMEOUT_SEC,
)
from speechrelay.services.gcp.credentials import ensure_credentials
from speechrelay.services.metrics import stt_active_streams

logger = logging.getLogger(__name__)

DataCallback = Callable[[str, bool], Any]
ErrorCallback = Callable[[Exception], Any]


@dataclass(frozen=True)
class STTConfig:
    """Recognition parameters for one stream."""
    language_code: str
    encoding: Optional[str] = None
    sample_rate_hertz: Optional[int] = None

    def __post_init__(self):
        if self.encoding is not None and self.encoding not in STT_ENCODINGS:
            raise ValueError(f"Unsupported STT encoding: {self.encoding}")

    def to_streaming_config(self) -> speech.StreamingRecognitionConfig:
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding[self.encoding or STT_DEFAULT_ENCODING],
            sample_rate_hertz=self.sample_rate_hertz or STT_DEFAULT_SAMPLE_RATE,
            language_code=self.language_code,
            enable_automatic_punctuation=True,
        )
        return speech.StreamingRecognitionConfig(
            config=config,
            interim_results=True,
        )


class RecognizeStream:
    """
    Handle for one streaming recognition session.

    Audio goes in through ``write``; ``end`` half-closes the request stream so
    the provider can flush its last results.
    """

    def __init__(
        self,
        client,
        streaming_config,
        on_data: DataCallback,
        on_error: ErrorCallback,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        timeout: Optional[float] = STT_STREAM_TIMEOUT_SEC,
    ):
        self._client = client
        self._streaming_config = streaming_config
        self._on_data = on_data
        self._on_error = on_error
        self._loop = loop
        self._audio_queue: Queue = Queue()
        self._ended = threading.Event()
        self._done = threading.Event()
        self._error_lock = threading.Lock()
        self._error_emitted = False
        self._callback_tasks: Set[asyncio.Task] = set()
        self._thread = threading.Thread(target=self._run, name="stt-stream", daemon=True)
        self._timer = threading.Timer(timeout, self.end) if timeout else None

    def start(self) -> "RecognizeStream":
        stt_active_streams.inc()
        self._thread.start()
        if self._timer is not None:
            self._timer.daemon = True
            self._timer.start()
        return self

    @property
    def closed(self) -> bool:
        return self._done.is_set()

    def write(self, chunk: bytes) -> bool:
        """Queue an audio chunk. Returns False once the stream has been ended."""
        if self._ended.is_set():
            logger.debug("Dropping audio written after STT stream end")
            return False
        self._audio_queue.put(chunk)
        return True

    def end(self):
        """Half-close: no more audio will be sent."""
        if not self._ended.is_set():
            self._ended.set()
            self._audio_queue.put(None)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the provider stream finishes. Returns True when done."""
        return self._done.wait(timeout)

    def _requests(self) -> Iterator[speech.StreamingRecognizeRequest]:
        while True:
            chunk = self._audio_queue.get()
            if chunk is None:
                return
            yield speech.StreamingRecognizeRequest(audio_content=chunk)

    def _run(self):
        try:
            responses = self._client.streaming_recognize(
                config=self._streaming_config,
                requests=self._requests(),
            )
            for response in responses:
                self._handle_response(response)
        except Exception as e:
            logger.error(f"STT stream error: {e}")
            self._emit_error(e)
        finally:
            self.end()
            if self._timer is not None:
                self._timer.cancel()
            stt_active_streams.dec()
            self._done.set()

    def _handle_response(self, response):
        # Silence windows and endpointing events carry no results
        if not response.results:
            return

        result = response.results[0]
        if not result.alternatives:
            return

        self._dispatch(self._on_data, result.alternatives[0].transcript, bool(result.is_final))

    def _emit_error(self, error: Exception):
        with self._error_lock:
            if self._error_emitted:
                return
            self._error_emitted = True
        self._dispatch(self._on_error, error)

    def _dispatch(self, callback: Callable, *args):
        if self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._invoke, callback, *args)
        else:
            self._invoke(callback, *args)

    def _invoke(self, callback: Callable, *args):
        try:
            result = callback(*args)
            if asyncio.iscoroutine(result):
                if self._loop is not None:
                    task = self._loop.create_task(result)
                    self._callback_tasks.add(task)
                    task.add_done_callback(self._on_callback_done)
                else:
                    asyncio.run(result)
        except Exception as e:
            logger.error(f"Error in STT callback: {e}")

    def _on_callback_done(self, task: asyncio.Task):
        self._callback_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Error in STT callback: {exc}")


class GCPSpeechService:
    """Opens streaming recognition sessions against Google Speech-to-Text."""

    def __init__(
        self,
        client=None,
        stream_timeout: Optional[float] = STT_STREAM_TIMEOUT_SEC,
        credentials_path: Optional[str] = None,
    ):
        self._client = client
        self._credentials_path = credentials_path
        self._client_lock = threading.Lock()
        self._stream_timeout = stream_timeout

    def _get_client(self):
        # One client serves every stream; it holds no per-stream state
        with self._client_lock:
            if self._client is None:
                ensure_credentials(self._credentials_path)
                self._client = speech.SpeechClient()
            return self._client

    def create_recognize_stream(
        self,
        config: STTConfig,
        on_data: DataCallback,
        on_error: ErrorCallback,
    ) -> RecognizeStream:
        """
        Open a streaming recognition session.

        Args:
            config: Language, encoding and sample rate for the session
            on_data: Called with (transcript, is_final) per provider result
            on_error: Called once if the stream fails after it was opened

        Raises:
            Any client construction or credential error, synchronously.
        """
        try:
            client = self._get_client()
            streaming_config = config.to_streaming_config()
        except Exception as e:
            logger.error(f"Failed to create STT stream: {e}")
            raise

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        stream = RecognizeStream(
            client,
            streaming_config,
            on_data,
            on_error,
            loop=loop,
            timeout=self._stream_timeout,
        )
        logger.info(f"🎙️ Opening STT stream (lang: {config.language_code})")
        return stream.start()
