"""Throughput and memory benchmarks for charset conversion.

Runs the streaming reader and writer over a fixed set of sample texts for
each selected charset and reports bytes per second and resident memory growth
as measured by psutil.
"""

import gc
import io
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import psutil

from ultra_robust_charset.catalog.context import CharsetContext
from ultra_robust_charset.shared import CharsetError, DirectionError, get_logger

DIRECTIONS = ("decode", "encode")

# Relative change in processing time reported as an improvement or regression
CHANGE_THRESHOLD = 0.05

_METRICS = (
    "processing_time_ms",
    "memory_used_mb",
    "bytes_per_second",
    "memory_per_byte",
)


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    charset: str
    direction: str
    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    bytes_processed: int
    bytes_produced: int
    success: bool
    error_message: Optional[str] = None

    @property
    def bytes_per_second(self) -> float:
        """Calculate input bytes converted per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_processed * 1000.0) / self.processing_time_ms

    @property
    def memory_per_byte(self) -> float:
        """Calculate memory growth per input byte."""
        if self.bytes_processed <= 0:
            return 0.0
        return (self.memory_used_mb * 1024 * 1024) / self.bytes_processed


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Conversion Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        """Add a benchmark result to the suite."""
        self.results.append(result)

    def get_results_by_charset(self, charset: str) -> List[BenchmarkResult]:
        """Get all results for a specific charset."""
        return [r for r in self.results if r.charset == charset]

    def get_results_by_test_case(self, test_case: str) -> List[BenchmarkResult]:
        """Get all results for a specific test case."""
        return [r for r in self.results if r.test_case == test_case]

    def get_statistics(self, charset: str, metric: str) -> Dict[str, float]:
        """Get statistical analysis of one metric over a charset's successful runs."""
        if metric not in _METRICS:
            raise ValueError(f"metric must be one of {list(_METRICS)}")
        values = [
            getattr(r, metric) for r in self.get_results_by_charset(charset) if r.success
        ]
        if not values:
            return {}

        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values),
        }

    def generate_report(self) -> Dict[str, Any]:
        """Generate a summary and per-test-case report."""
        charsets = sorted(set(r.charset for r in self.results))
        test_cases = sorted(set(r.test_case for r in self.results))

        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "charsets": charsets,
            "test_cases": test_cases,
            "summary": {},
            "detailed_results": {},
        }

        for charset in charsets:
            charset_results = self.get_results_by_charset(charset)
            successful = [r for r in charset_results if r.success]
            report["summary"][charset] = {
                "total_runs": len(charset_results),
                "successful_runs": len(successful),
                "success_rate": len(successful) / len(charset_results),
                "throughput": self.get_statistics(charset, "bytes_per_second"),
                "memory": self.get_statistics(charset, "memory_used_mb"),
            }

        for test_case in test_cases:
            detail: Dict[str, Any] = {}
            for result in self.get_results_by_test_case(test_case):
                detail[f"{result.charset}/{result.direction}"] = {
                    "processing_time_ms": result.processing_time_ms,
                    "memory_used_mb": result.memory_used_mb,
                    "bytes_per_second": result.bytes_per_second,
                    "success": result.success,
                    "error": result.error_message,
                }
            report["detailed_results"][test_case] = detail

        return report


class ConversionBenchmark:
    """Benchmark the streaming reader and writer for a set of charsets."""

    def __init__(
        self,
        context: Optional[CharsetContext] = None,
        charsets: Optional[Sequence[str]] = None,
        correlation_id: Optional[str] = None,
        warmup_runs: int = 3,
        benchmark_runs: int = 10,
    ) -> None:
        """Initialize benchmark.

        Args:
            context: Context resolving the charsets, a fresh one by default
            charsets: Charsets to measure, every catalog charset by default
            correlation_id: Optional correlation ID for tracking
            warmup_runs: Number of warmup runs before benchmarking
            benchmark_runs: Number of benchmark runs to average
        """
        if benchmark_runs <= 0:
            raise ValueError("benchmark_runs must be > 0")
        self.context = context or CharsetContext()
        self.charsets = list(charsets) if charsets is not None else self.context.names()
        self.correlation_id = correlation_id
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.logger = get_logger(__name__, correlation_id, "benchmark")
        self.test_cases = self._create_test_cases()

    def _create_test_cases(self) -> Dict[str, str]:
        """Create sample texts, all representable in the bundled code pages."""
        return {
            "small_ascii": "The quick brown fox jumps over the lazy dog.\n",
            "accented_text": (
                "Café crème, naïve façade, "
                "über schön, señor año.\n"
            ),
            "large_mixed": self._generate_large_text(),
        }

    def _generate_large_text(self) -> str:
        lines = []
        for i in range(2000):
            lines.append(
                f"Line {i}: résumé #{i % 97} à la carte, "
                f"{i * 3} élèves, Ångström.\n"
            )
        return "".join(lines)

    def _measure_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def _sample_input(self, charset: str, direction: str, text: str) -> bytes:
        """Input bytes for one run: UTF-8 to encode, charset bytes to decode."""
        if direction == "encode":
            return text.encode("utf-8")
        try:
            translator = self.context.translator_to(charset)
        except DirectionError:
            # Decode-only charsets are fed their ASCII subset
            return text.encode("ascii", "replace")
        _, data = translator.translate(text.encode("utf-8"), True)
        return bytes(data)

    def _convert(self, charset: str, direction: str, data: bytes) -> int:
        if direction == "decode":
            reader = self.context.new_reader(charset, io.BytesIO(data))
            return len(reader.readall())
        sink = io.BytesIO()
        writer = self.context.new_writer(charset, sink)
        writer.write(data)
        writer.close()
        return len(sink.getvalue())

    def _benchmark_once(
        self, charset: str, direction: str, test_case: str, text: str
    ) -> BenchmarkResult:
        try:
            data = self._sample_input(charset, direction, text)
        except CharsetError as e:
            return BenchmarkResult(
                charset, direction, test_case, 0.0, 0.0, 0, 0, False, str(e)
            )

        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.time()
        try:
            produced = self._convert(charset, direction, data)
            success = True
            error_message = None
        except CharsetError as e:
            produced = 0
            success = False
            error_message = str(e)
        processing_time = (time.time() - start_time) * 1000
        memory_used = max(0.0, self._measure_memory_usage() - memory_before)

        return BenchmarkResult(
            charset=charset,
            direction=direction,
            test_case=test_case,
            processing_time_ms=processing_time,
            memory_used_mb=memory_used,
            bytes_processed=len(data),
            bytes_produced=produced,
            success=success,
            error_message=error_message,
        )

    def run_benchmark(self, directions: Sequence[str] = DIRECTIONS) -> BenchmarkSuite:
        """Run every test case for every charset and direction.

        Returns:
            BenchmarkSuite with one averaged result per combination
        """
        for direction in directions:
            if direction not in DIRECTIONS:
                raise ValueError(f"direction must be one of {list(DIRECTIONS)}")

        suite = BenchmarkSuite(suite_name="Conversion Performance Benchmark")
        self.logger.info(
            "Starting benchmark suite",
            extra={
                "charsets": self.charsets,
                "test_cases": len(self.test_cases),
                "warmup_runs": self.warmup_runs,
                "benchmark_runs": self.benchmark_runs,
            },
        )

        for test_case, text in self.test_cases.items():
            for charset in self.charsets:
                for direction in directions:
                    for _ in range(self.warmup_runs):
                        self._benchmark_once(charset, direction, test_case, text)
                    runs = [
                        self._benchmark_once(charset, direction, test_case, text)
                        for _ in range(self.benchmark_runs)
                    ]
                    suite.add_result(self._average(runs))

        self.logger.info(
            "Benchmark suite completed",
            extra={"total_results": len(suite.results)},
        )
        return suite

    @staticmethod
    def _average(runs: List[BenchmarkResult]) -> BenchmarkResult:
        successful = [r for r in runs if r.success]
        first = runs[0]
        if not successful:
            return first
        return BenchmarkResult(
            charset=first.charset,
            direction=first.direction,
            test_case=first.test_case,
            processing_time_ms=statistics.mean(r.processing_time_ms for r in successful),
            memory_used_mb=statistics.mean(r.memory_used_mb for r in successful),
            bytes_processed=successful[0].bytes_processed,
            bytes_produced=successful[0].bytes_produced,
            success=True,
        )

    @staticmethod
    def compare_performance(
        baseline_suite: BenchmarkSuite, current_suite: BenchmarkSuite
    ) -> Dict[str, Any]:
        """Compare processing times between two benchmark suites.

        Args:
            baseline_suite: Baseline benchmark results
            current_suite: Current benchmark results

        Returns:
            Report of improvements and regressions beyond the change threshold
        """
        comparison: Dict[str, Any] = {
            "baseline_timestamp": baseline_suite.timestamp,
            "current_timestamp": current_suite.timestamp,
            "improvements": {},
            "regressions": {},
            "summary": {},
        }

        current = {
            (r.charset, r.direction, r.test_case): r for r in current_suite.results
        }
        for baseline in baseline_suite.results:
            key = (baseline.charset, baseline.direction, baseline.test_case)
            result = current.get(key)
            if result is None or not (baseline.success and result.success):
                continue
            if baseline.processing_time_ms <= 0:
                continue
            change = (
                result.processing_time_ms - baseline.processing_time_ms
            ) / baseline.processing_time_ms
            entry = {
                "baseline_time_ms": baseline.processing_time_ms,
                "current_time_ms": result.processing_time_ms,
                "change_percent": change * 100,
            }
            name = "/".join(key)
            if change < -CHANGE_THRESHOLD:
                comparison["improvements"][name] = entry
            elif change > CHANGE_THRESHOLD:
                comparison["regressions"][name] = entry

        comparison["summary"] = {
            "total_improvements": len(comparison["improvements"]),
            "total_regressions": len(comparison["regressions"]),
            "has_regressions": len(comparison["regressions"]) > 0,
        }
        return comparison
