"""
Tests for Application Metrics.
"""

import pytest

from sheet_forwarder.infrastructure.metrics import Counter, Histogram, MetricsRegistry


class TestCounter:
    """Tests for Counter."""

    def test_counts_per_label_set(self):
        counter = Counter("forwards_sent_total", "Forwards")

        counter.inc(status="success")
        counter.inc(2, status="success")
        counter.inc(status="error")

        assert counter.value(status="success") == 3
        assert counter.value(status="error") == 1
        assert counter.value() == 0

    def test_negative_increment_rejected(self):
        with pytest.raises(ValueError):
            Counter("c", "c").inc(-1)


class TestHistogram:
    """Tests for Histogram."""

    def test_samples_are_cumulative(self):
        histogram = Histogram("latency", "Latency", buckets=(1.0, 5.0))

        histogram.observe(0.5)
        histogram.observe(3.0)

        samples = histogram.samples()
        assert 'latency_bucket{le="1.0"} 1' in samples
        assert 'latency_bucket{le="5.0"} 2' in samples
        assert 'latency_bucket{le="+Inf"} 2' in samples
        assert "latency_count 2" in samples


class TestMetricsRegistry:
    """Tests for MetricsRegistry."""

    def test_prometheus_export_lists_all_metrics(self):
        registry = MetricsRegistry()
        registry.rows_processed_total.inc()

        text = registry.to_prometheus_format()

        assert "# TYPE rows_processed_total counter" in text
        assert "rows_processed_total 1.0" in text
        assert "# TYPE http_request_duration_seconds histogram" in text
        assert "# HELP runs_total" in text
