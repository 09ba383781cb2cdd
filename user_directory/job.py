#!/usr/bin/env python3
"""
Command-line fetch:
- validate the requested number of users
- fetch them from the API
- print a table and summary for logs
"""

import argparse
from typing import List, Optional

import pandas as pd

from .api_client import RandomUserClient, build_url
from .config import Settings, configure_logging
from .errors import FetchError
from .models import DEFAULT_REQUEST_COUNT, RequestCountError, validate_request_count
from .transformations import users_frame


def run_fetch_job(count: int, client: RandomUserClient) -> dict: # this will be a dict of metrics about the fetch.
    """
    Fetch ``count`` users once, print them and return metrics.

    FetchError propagates to the caller.
    """
    # --------------------------------------------------------------------------------------------------
    # 1) Fetch from API and flatten for display
    # --------------------------------------------------------------------------------------------------
    users = client.fetch_users(count)
    df_display = users_frame(users)

    # --------------------------------------------------------------------------------------------------
    # 2) Collect metrics and print the summary (stdout, picked up by whatever runs the job)
    # --------------------------------------------------------------------------------------------------
    metrics = {
        "api_url": build_url(count, client.api_url),
        "rows_requested": count,
        "rows_fetched": len(df_display),
    }

    with pd.option_context("display.max_rows", None, "display.width", 160):
        # option_context only changes Pandas display settings inside this block, so 50 rows print in full.
        print(df_display[["full_name", "gender", "email"]].to_string(index=False))
    print(f"api_url={metrics['api_url']}")
    print(f"rows_requested={metrics['rows_requested']} rows_fetched={metrics['rows_fetched']}")
    return metrics


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch random user profiles and print them.")
    parser.add_argument("--count", default=str(DEFAULT_REQUEST_COUNT), help="number of users, 1-50")
    args = parser.parse_args(argv)

    settings = Settings.from_env() # reads .env, then the environment
    configure_logging(settings.log_level)

    try:
        count = validate_request_count(args.count) # same 1-50 rule as the page form
    except RequestCountError as exc:
        print(f"error: {exc}")
        return 2

    client = RandomUserClient.from_settings(settings)
    try:
        run_fetch_job(count, client)
    except FetchError as exc:
        print(f"error: {exc}")
        return 1
    finally:
        client.close() # release the pooled connection of the requests Session
    return 0 # Returns int exit code (0 = success, non-zero = failure).


if __name__ == "__main__":
    raise SystemExit(main())
