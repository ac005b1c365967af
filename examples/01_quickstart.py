from __future__ import annotations

from _infra import JOKE_URL, banner

from fanout import dispatch_sync, unpack_bodies
from kungfu import Error, Ok


def main() -> None:
    banner("01_quickstart: three GETs, wait for all, inspect each outcome")

    urls = [JOKE_URL, JOKE_URL, JOKE_URL]
    outcomes = dispatch_sync(urls)

    for outcome in outcomes:
        match outcome:
            case Ok(body):
                print(f"ok: {body}")
            case Error(err):
                print(f"error: {err}")

    bodies, errors = unpack_bodies(outcomes)
    print(f"{sum(err is None for err in errors)}/{len(bodies)} succeeded")


if __name__ == "__main__":
    main()
