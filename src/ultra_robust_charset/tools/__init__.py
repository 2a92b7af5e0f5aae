"""Developer tools for measuring conversion performance."""

from .benchmarks import BenchmarkResult, BenchmarkSuite, ConversionBenchmark

__all__ = ["BenchmarkResult", "BenchmarkSuite", "ConversionBenchmark"]
