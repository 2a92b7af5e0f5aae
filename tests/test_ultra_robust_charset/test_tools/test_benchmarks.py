"""Tests for the conversion benchmarks."""

from unittest.mock import patch

import pytest

from ultra_robust_charset.catalog.context import CharsetContext
from ultra_robust_charset.tools.benchmarks import (
    BenchmarkResult,
    BenchmarkSuite,
    ConversionBenchmark,
)


def make_result(charset="latin1", direction="decode", test_case="case",
                time_ms=10.0, success=True):
    return BenchmarkResult(
        charset=charset,
        direction=direction,
        test_case=test_case,
        processing_time_ms=time_ms,
        memory_used_mb=1.0,
        bytes_processed=1000,
        bytes_produced=1100,
        success=success,
    )


class TestBenchmarkResult:
    """Test derived benchmark metrics."""

    def test_bytes_per_second(self):
        """Test throughput calculation."""
        assert make_result(time_ms=10.0).bytes_per_second == 100000.0
        assert make_result(time_ms=0.0).bytes_per_second == 0.0

    def test_memory_per_byte(self):
        """Test memory growth per input byte."""
        result = make_result()

        assert result.memory_per_byte == pytest.approx(1048.576)


class TestBenchmarkSuite:
    """Test result aggregation."""

    def test_statistics(self):
        """Test statistics over a charset's successful runs."""
        suite = BenchmarkSuite()
        suite.add_result(make_result(time_ms=10.0))
        suite.add_result(make_result(time_ms=20.0))
        suite.add_result(make_result(time_ms=30.0, success=False))

        stats = suite.get_statistics("latin1", "processing_time_ms")

        assert stats["count"] == 2
        assert stats["mean"] == 15.0
        assert stats["min"] == 10.0
        assert suite.get_statistics("cp437", "processing_time_ms") == {}

    def test_unknown_metric(self):
        """Test that unknown metric names are rejected."""
        with pytest.raises(ValueError, match="metric must be one of"):
            BenchmarkSuite().get_statistics("latin1", "tokens_per_second")

    def test_generate_report(self):
        """Test the report layout."""
        suite = BenchmarkSuite(suite_name="report")
        suite.add_result(make_result("latin1", "decode", "a"))
        suite.add_result(make_result("big5", "encode", "a", success=False))

        report = suite.generate_report()

        assert report["suite_name"] == "report"
        assert report["charsets"] == ["big5", "latin1"]
        assert report["summary"]["big5"]["success_rate"] == 0.0
        assert report["summary"]["latin1"]["successful_runs"] == 1
        assert set(report["detailed_results"]["a"]) == {"latin1/decode", "big5/encode"}


class TestConversionBenchmark:
    """Test running benchmarks against a context."""

    def test_run_benchmark(self):
        """Test one averaged result per test case, charset and direction."""
        benchmark = ConversionBenchmark(
            context=CharsetContext(),
            charsets=["latin1", "big5"],
            warmup_runs=0,
            benchmark_runs=1,
        )

        suite = benchmark.run_benchmark()

        assert len(suite.results) == len(benchmark.test_cases) * 2 * 2
        latin1 = suite.get_results_by_charset("latin1")
        assert all(r.success for r in latin1)
        big5_encode = [
            r for r in suite.get_results_by_charset("big5") if r.direction == "encode"
        ]
        assert big5_encode and not any(r.success for r in big5_encode)
        assert "encode" in big5_encode[0].error_message

    def test_decode_input_is_charset_bytes(self):
        """Test that decode runs are fed text encoded in the charset."""
        benchmark = ConversionBenchmark(charsets=["latin1"], benchmark_runs=1)

        result = benchmark._benchmark_once("latin1", "decode", "t", "é")

        assert result.bytes_processed == 1
        assert result.bytes_produced == 2

    def test_memory_measured_with_psutil(self):
        """Test that memory readings come from the current process."""
        benchmark = ConversionBenchmark(charsets=[], benchmark_runs=1)

        with patch("ultra_robust_charset.tools.benchmarks.psutil.Process") as process:
            process.return_value.memory_info.return_value.rss = 3 * 1024 * 1024
            assert benchmark._measure_memory_usage() == 3.0

    def test_defaults_to_catalog_charsets(self):
        """Test that every catalog charset is measured by default."""
        context = CharsetContext()

        benchmark = ConversionBenchmark(context=context)

        assert benchmark.charsets == context.names()

    def test_invalid_arguments(self):
        """Test validation of run counts and directions."""
        with pytest.raises(ValueError):
            ConversionBenchmark(benchmark_runs=0)

        benchmark = ConversionBenchmark(charsets=[], benchmark_runs=1)
        with pytest.raises(ValueError):
            benchmark.run_benchmark(directions=("sideways",))

    def test_compare_performance(self):
        """Test detection of improvements and regressions."""
        baseline = BenchmarkSuite()
        baseline.add_result(make_result("latin1", test_case="a", time_ms=10.0))
        baseline.add_result(make_result("cp437", test_case="a", time_ms=10.0))
        baseline.add_result(make_result("big5", test_case="a", time_ms=10.0))
        current = BenchmarkSuite()
        current.add_result(make_result("latin1", test_case="a", time_ms=5.0))
        current.add_result(make_result("cp437", test_case="a", time_ms=20.0))
        current.add_result(make_result("big5", test_case="a", time_ms=10.2))

        comparison = ConversionBenchmark.compare_performance(baseline, current)

        assert list(comparison["improvements"]) == ["latin1/decode/a"]
        assert list(comparison["regressions"]) == ["cp437/decode/a"]
        assert comparison["summary"]["has_regressions"] is True
