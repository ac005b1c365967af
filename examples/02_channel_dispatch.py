from __future__ import annotations

import httpx
from _infra import JOKE_URL, banner, run

from fanout import DispatchPolicy, dispatch_async, partition_outcomes


async def main() -> None:
    banner("02_channel_dispatch: shared client, bounded fan-out, partial failure")

    urls = [JOKE_URL, "https://unreachable.invalid/", JOKE_URL, "not a url"]

    async with httpx.AsyncClient() as client:
        outcomes = (
            await dispatch_async(urls, client=client, policy=DispatchPolicy(concurrency=2))
        ).unwrap()

    bodies, failures = partition_outcomes(outcomes)
    print(f"bodies: {len(bodies)}")
    for failure in failures:
        print(f"  ✗ {failure}")


if __name__ == "__main__":
    run(main)
