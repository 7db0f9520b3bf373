"""
Benchmarks for txproof hashing and tree operations.

Run with: python -m txproof.utils.benchmark
"""

import time
import statistics
from typing import Callable, List
from dataclasses import dataclass

from txproof.crypto import sha256, keccak256
from txproof.core.merkle import MerkleTree, combine
from txproof.core.commitment import hash_commitment


# =============================================================================
# Benchmark Framework
# =============================================================================


@dataclass
class BenchmarkResult:
    """Result of a benchmark run."""
    name: str
    iterations: int
    total_time_ms: float
    avg_time_ms: float
    min_time_ms: float
    max_time_ms: float
    ops_per_sec: float

    def __str__(self) -> str:
        return (
            f"{self.name}: {self.ops_per_sec:.0f} ops/s "
            f"(avg={self.avg_time_ms:.3f}ms, min={self.min_time_ms:.3f}ms, max={self.max_time_ms:.3f}ms)"
        )


def benchmark(
    name: str,
    func: Callable,
    iterations: int = 1000,
    warmup: int = 100,
) -> BenchmarkResult:
    """
    Run a benchmark.

    Args:
        name: Benchmark name
        func: Function to benchmark (no args)
        iterations: Number of iterations
        warmup: Warmup iterations

    Returns:
        BenchmarkResult
    """
    for _ in range(warmup):
        func()

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func()
        end = time.perf_counter()
        times.append((end - start) * 1000)  # ms

    total = sum(times)
    avg = statistics.mean(times)

    return BenchmarkResult(
        name=name,
        iterations=iterations,
        total_time_ms=total,
        avg_time_ms=avg,
        min_time_ms=min(times),
        max_time_ms=max(times),
        ops_per_sec=1000 / avg if avg > 0 else float("inf"),
    )


# =============================================================================
# Hash Benchmarks
# =============================================================================


def benchmark_hashing() -> List[BenchmarkResult]:
    """Benchmark hash functions."""
    results = []
    data = b"x" * 64
    left, right = keccak256(b"a"), keccak256(b"b")

    results.append(benchmark(
        "SHA-256 (64 bytes)",
        lambda: sha256(data),
        iterations=10000,
    ))

    results.append(benchmark(
        "Keccak-256 (64 bytes)",
        lambda: keccak256(data),
        iterations=10000,
    ))

    results.append(benchmark(
        "Pair combine",
        lambda: combine(left, right),
        iterations=10000,
    ))

    return results


# =============================================================================
# Merkle Tree Benchmarks
# =============================================================================


def benchmark_merkle(sizes: List[int] = None) -> List[BenchmarkResult]:
    """Benchmark tree build, proof lookup and verification."""
    results = []

    for n in sizes or [16, 256, 1000]:
        leaves = [i.to_bytes(4, "big") for i in range(n)]
        results.append(benchmark(
            f"Merkle Build ({n} leaves)",
            lambda: MerkleTree.build(leaves),
            iterations=max(1, 2000 // n),
            warmup=1,
        ))

    leaves = [i.to_bytes(4, "big") for i in range(256)]
    tree = MerkleTree.build(leaves)
    proof = tree.proof(17)
    results.append(benchmark(
        "Merkle Verify (256 leaves)",
        lambda: MerkleTree.verify(leaves[17], proof, tree.root),
        iterations=1000,
    ))

    return results


def benchmark_commitments() -> List[BenchmarkResult]:
    """Benchmark identifier-commitment mode on a block-sized hash list."""
    tx_hashes = ["0x" + keccak256(i.to_bytes(4, "big")).hex() for i in range(200)]
    tx_root = "0x" + keccak256(b"root").hex()

    return [benchmark(
        "Hash Commitment (200 txs)",
        lambda: hash_commitment(tx_hashes, tx_root, tx_hash=tx_hashes[150]),
        iterations=20,
        warmup=2,
    )]


# =============================================================================
# Main
# =============================================================================


def run_all_benchmarks() -> None:
    """Run all benchmarks and print results."""
    print("=" * 60)
    print("txproof Performance Benchmarks")
    print("=" * 60)

    sections = [
        ("Hashing", benchmark_hashing),
        ("Merkle Trees", benchmark_merkle),
        ("Commitments", benchmark_commitments),
    ]

    for section_name, bench_func in sections:
        print(f"\n{section_name}")
        print("-" * 40)
        results = bench_func()
        for r in results:
            print(f"  {r}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    run_all_benchmarks()
