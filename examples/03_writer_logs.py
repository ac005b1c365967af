from __future__ import annotations

from _infra import JOKE_URL, banner, run

from fanout import dispatch_join_w, unpack_bodies
from kungfu import Error, Ok


async def main() -> None:
    banner("03_writer_logs: outcomes plus one log line per request")

    writer = (
        dispatch_join_w([JOKE_URL, "https://unreachable.invalid/"])
        .map(unpack_bodies)
        .with_log("unpacked")
    )

    match await writer.to_lazy_coro_result():
        case Ok(((bodies, errors), log)):
            print(f"bodies: {[len(b) for b in bodies]!r}")
            print(f"errors: {[str(e) if e else None for e in errors]!r}")
            print(f"log: {list(log)!r}")
        case Error(err):
            print(f"error: {err!r}")


if __name__ == "__main__":
    run(main)
