"""
Performance monitoring and metrics collection.
"""
import inspect
import time
import logging
import threading
from collections import defaultdict
from functools import wraps
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Samples kept per metric
MAX_SAMPLES = 1000

_metrics_lock = threading.Lock()
_metrics: Dict[str, List[Dict[str, Any]]] = defaultdict(list)


class PerformanceMonitor:
    """In-process store of timing samples, shared by every request."""

    @staticmethod
    def record_metric(name: str, value: float, metadata: Optional[Dict[str, Any]] = None):
        """
        Record one sample for a metric.

        Args:
            name: Metric name (e.g. 'analyze_data', 'request_duration')
            value: Sample value, usually a duration in seconds
            metadata: Optional context (correlation_id, status, ...)
        """
        with _metrics_lock:
            samples = _metrics[name]
            samples.append({
                'value': value,
                'timestamp': time.time(),
                'metadata': metadata or {},
            })
            if len(samples) > MAX_SAMPLES:
                del samples[:-MAX_SAMPLES]

    @staticmethod
    def get_stats(metric_name: str) -> Optional[Dict[str, float]]:
        """
        Summary statistics for a metric.

        Returns:
            Dict with count, min, max, mean and percentiles, or None if no data
        """
        with _metrics_lock:
            samples = _metrics.get(metric_name)
            if not samples:
                return None
            values = sorted(s['value'] for s in samples)

        count = len(values)
        return {
            'count': count,
            'min': values[0],
            'max': values[-1],
            'mean': sum(values) / count,
            'p50': values[count // 2],
            'p95': values[int(count * 0.95)],
            'p99': values[int(count * 0.99)],
        }

    @staticmethod
    def get_all_metrics() -> Dict[str, Dict[str, float]]:
        with _metrics_lock:
            names = list(_metrics.keys())
        return {name: PerformanceMonitor.get_stats(name) for name in names}

    @staticmethod
    def clear_metrics():
        """Clear all metrics (useful for testing)."""
        with _metrics_lock:
            _metrics.clear()


def _finish(metric_name: str, start_time: float, error: Optional[Exception] = None):
    duration = time.time() - start_time
    if error is None:
        PerformanceMonitor.record_metric(metric_name, duration, {'status': 'success'})
        logger.debug(
            f"{metric_name} completed in {duration:.3f}s",
            extra={'metric': metric_name, 'duration': duration}
        )
    else:
        PerformanceMonitor.record_metric(
            metric_name, duration, {'status': 'error', 'error': str(error)}
        )
        logger.error(
            f"{metric_name} failed after {duration:.3f}s: {error}",
            extra={'metric': metric_name, 'duration': duration},
            exc_info=True
        )


def track_performance(metric_name: str):
    """
    Decorator to time a function, sync or async.

    Usage:
        @track_performance("analyze_data")
        def analyze_data(...):
            ...
    """
    def decorator(func):
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _finish(metric_name, start_time, e)
                    raise
                _finish(metric_name, start_time)
                return result
            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _finish(metric_name, start_time, e)
                raise
            _finish(metric_name, start_time)
            return result
        return sync_wrapper

    return decorator
