"""Prometheus metrics instrumentation for the provider layer.

Exposes metrics for monitoring translation engine usage, TTS cache
effectiveness, STT stream counts and cleanup activity. Metrics are
exposed via HTTP on a configurable port.

Metrics exported:
- translation_requests_total: Counter of translate calls by engine and status
- translation_fallbacks_total: Counter of primary -> secondary switches
- translation_latency_seconds: Histogram of translate latency per engine
- tts_cache_requests_total: Counter of TTS cache hits/misses
- tts_cache_write_failures_total: Counter of failed cache write-backs
- stt_active_streams: Gauge of currently open recognition streams
- cleanup_deleted_total: Counter of evicted rooms and cache files

Usage:
    from speechrelay.services.metrics import start_metrics_server, tts_cache_requests

    start_metrics_server(port=8001)
    tts_cache_requests.labels(result='hit').inc()
"""

from prometheus_client import Histogram, Counter, Gauge, start_http_server
import logging

logger = logging.getLogger(__name__)

translation_requests = Counter(
    'translation_requests_total',
    'Total translate calls',
    labelnames=['engine', 'status']  # status: success, error
)

translation_fallbacks = Counter(
    'translation_fallbacks_total',
    'Translate calls served by the secondary engine after a primary failure',
    labelnames=['primary', 'secondary']
)

translation_latency = Histogram(
    'translation_latency_seconds',
    'Time spent in a provider translate call',
    labelnames=['engine']
)

tts_cache_requests = Counter(
    'tts_cache_requests_total',
    'TTS synthesis requests by cache result',
    labelnames=['result']  # result: hit, miss
)

tts_cache_write_failures = Counter(
    'tts_cache_write_failures_total',
    'Failed asynchronous TTS cache writes'
)

stt_active_streams = Gauge(
    'stt_active_streams',
    'Number of currently open speech recognition streams'
)

cleanup_deleted = Counter(
    'cleanup_deleted_total',
    'Entities removed by the cleanup scheduler',
    labelnames=['target']  # target: rooms, tts_cache
)


def start_metrics_server(port: int = 8001):
    """Start Prometheus metrics HTTP server."""
    try:
        start_http_server(port)
        logger.info(f"✅ Metrics server started on port {port}")
    except Exception as e:
        logger.error(f"❌ Failed to start metrics server: {e}")
