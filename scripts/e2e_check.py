#!/usr/bin/env python3
"""
Explore service end-to-end check

Replays a fixed like/pass scenario against a running service over HTTP.
Assumes the service and its database are up and the decisions table is empty.

Usage:
    python scripts/e2e_check.py
    python scripts/e2e_check.py --base-url http://localhost:8080

Flow:
    1. Put 3 decisions (1 passes on 2, 1 likes 3, 3 likes 1 -> match)
    2. Count likes for users 1, 2 and 3
    3. List new likes for 1 and 3
    4. List new likes for 1 again (must be empty)
    5. Put a new decision (2 likes 1)
    6. List new likes for 1
    7. List all likes for 1
"""
import argparse
import sys
import time
from typing import Optional

import httpx


class CheckFailed(Exception):
    pass


def put_decision(client: httpx.Client, actor: str, recipient: str, liked: bool, should_be_mutual: bool) -> None:
    response = client.put(
        "/v1/decision",
        json={"actor_user_id": actor, "recipient_user_id": recipient, "liked_recipient": liked},
    )
    response.raise_for_status()
    mutual = response.json()["mutual_likes"]
    if mutual != should_be_mutual:
        raise CheckFailed(f"unexpected mutual likes for {actor}->{recipient}: got {mutual}, want {should_be_mutual}")


def count_likes(client: httpx.Client, recipient: str, want: int) -> None:
    response = client.get("/v1/liked-you/count", params={"recipient_user_id": recipient})
    response.raise_for_status()
    count = response.json()["count"]
    if count != want:
        raise CheckFailed(f"unexpected count for user {recipient}: got {count}, want {want}")


def list_likes(client: httpx.Client, recipient: str, want: list[str], only_new: bool) -> None:
    path = "/v1/liked-you/new" if only_new else "/v1/liked-you"
    response = client.get(path, params={"recipient_user_id": recipient})
    response.raise_for_status()
    got = [liker["actor_id"] for liker in response.json()["likers"]]
    if got != want:
        kind = "new likes" if only_new else "likes"
        raise CheckFailed(f"unexpected {kind} for user {recipient}: got {got}, want {want}")


def run(base_url: str, settle_seconds: float) -> None:
    with httpx.Client(base_url=base_url, timeout=5.0) as client:
        # 1.
        put_decision(client, "1", "2", liked=False, should_be_mutual=False)
        put_decision(client, "1", "3", liked=True, should_be_mutual=False)
        put_decision(client, "3", "1", liked=True, should_be_mutual=True)
        print("Decisions introduced")

        # 2.
        count_likes(client, "1", 1)
        count_likes(client, "2", 0)
        count_likes(client, "3", 1)
        print("Decisions counted")

        # Seen-marking only covers decisions older than the listing second.
        time.sleep(settle_seconds)

        # 3.
        list_likes(client, "1", ["3"], only_new=True)
        list_likes(client, "3", ["1"], only_new=True)
        time.sleep(settle_seconds)

        # 4.
        list_likes(client, "1", [], only_new=True)
        print("New likes listed")

        # 5.
        put_decision(client, "2", "1", liked=True, should_be_mutual=False)
        time.sleep(settle_seconds)

        # 6.
        list_likes(client, "1", ["2"], only_new=True)

        # 7.
        list_likes(client, "1", ["2", "3"], only_new=False)
        print("All likes listed")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the explore service end-to-end check")
    parser.add_argument("--base-url", default="http://localhost:8080", help="Service base URL")
    parser.add_argument("--settle-seconds", type=float, default=1.0, help="Pause between listing steps")
    args = parser.parse_args(argv)

    print("Running checks against", args.base_url)
    try:
        run(args.base_url, args.settle_seconds)
    except (CheckFailed, httpx.HTTPError) as e:
        print(f"Check failed: {e}", file=sys.stderr)
        return 1
    print("All the checks passed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
