import asyncio
import json
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import httpx
import matplotlib.pyplot as plt

from writeack.config import Settings
from writeack.main import create_app
from writeack.registry import DEFAULT_REGISTRY


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
ARTIFACTS_DIR = os.path.join(ROOT, "artifacts")

# Mixed case on purpose: lookups are case-insensitive.
LOOKUP_NAMES = ["MAJORITY", "w1", "W2", "Journaled", "acknowledged", "unknown-name"]
CONCURRENCY_LEVELS = [1, 2, 4, 8, 16]


@dataclass
class RunResult:
    concurrency: int
    lookups: int
    direct_lookups_per_s: float
    avg_http_latency_ms: float
    mismatching_lookups: int


def direct_lookups(concurrency: int, per_thread: int) -> tuple[float, int]:
    """Hammer the registry from ``concurrency`` threads released together."""
    expected = {name: DEFAULT_REGISTRY.entry(name) for name in LOOKUP_NAMES}
    barrier = threading.Barrier(concurrency)

    def worker(_: int) -> int:
        barrier.wait()
        mismatches = 0
        for i in range(per_thread):
            name = LOOKUP_NAMES[i % len(LOOKUP_NAMES)]
            if DEFAULT_REGISTRY.entry(name) is not expected[name]:
                mismatches += 1
        return mismatches

    t0 = time.perf_counter()
    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        mismatches = sum(pool.map(worker, range(concurrency)))
    t1 = time.perf_counter()

    return concurrency * per_thread / (t1 - t0), mismatches


async def http_lookups(client: httpx.AsyncClient, concurrency: int, requests: int) -> float:
    sem = asyncio.Semaphore(concurrency)
    latencies: list[float] = []

    async def one_get(i: int) -> None:
        name = LOOKUP_NAMES[i % len(LOOKUP_NAMES)]

        async with sem:
            t0 = time.perf_counter()
            r = await client.get(f"/presets/{name}")
            t1 = time.perf_counter()

        if r.status_code not in (200, 404):
            raise RuntimeError(f"GET /presets/{name} failed: {r.status_code} {r.text}")

        latencies.append((t1 - t0) * 1000.0)

    await asyncio.gather(*[one_get(i) for i in range(requests)])
    return sum(latencies) / len(latencies)


async def main() -> None:
    os.makedirs(ARTIFACTS_DIR, exist_ok=True)

    per_thread = int(os.environ.get("LOOKUPS_PER_THREAD", "50000"))
    http_requests = int(os.environ.get("HTTP_REQUESTS", "500"))

    app = create_app(Settings(log_level="WARNING"))
    transport = httpx.ASGITransport(app=app)

    results: list[RunResult] = []
    async with httpx.AsyncClient(transport=transport, base_url="http://writeack") as client:
        for c in CONCURRENCY_LEVELS:
            print(f"Running concurrency={c} ...")
            rate, mismatches = direct_lookups(c, per_thread)
            avg_latency = await http_lookups(client, c, http_requests)
            results.append(
                RunResult(
                    concurrency=c,
                    lookups=c * per_thread,
                    direct_lookups_per_s=rate,
                    avg_http_latency_ms=avg_latency,
                    mismatching_lookups=mismatches,
                )
            )

    # Save JSON
    out_json = os.path.join(ARTIFACTS_DIR, "benchmark_results.json")
    with open(out_json, "w", encoding="utf-8") as f:
        json.dump([r.__dict__ for r in results], f, indent=2)

    # Plot
    xs = [r.concurrency for r in results]
    ys = [r.direct_lookups_per_s / 1000.0 for r in results]

    plt.figure(figsize=(7, 4))
    plt.plot(xs, ys, marker="o")
    plt.xticks(xs)
    plt.xlabel("Concurrent readers (threads)")
    plt.ylabel("Registry lookups (thousands / s)")
    plt.title("Concurrent Readers vs Registry Lookup Throughput")
    plt.grid(True, alpha=0.3)

    out_png = os.path.join(ARTIFACTS_DIR, "registry_throughput.png")
    plt.tight_layout()
    plt.savefig(out_png, dpi=160)

    print("\nResults:")
    for r in results:
        print(
            f"concurrency={r.concurrency} lookups/s={r.direct_lookups_per_s:,.0f} "
            f"http_avg={r.avg_http_latency_ms:.2f}ms "
            f"mismatches={r.mismatching_lookups}/{r.lookups}"
        )

    print(f"\nWrote {out_png}")
    print(f"Wrote {out_json}")


if __name__ == "__main__":
    asyncio.run(main())
