#!/usr/bin/env python3

# ------------------------------------------------------------------------------------------
# --------------------- HTTP client for the RandomUser API ----------------------------------
# ------------------------------------------------------------------------------------------
import logging
from typing import List, Optional

import requests

from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT, Settings, Variant
from .errors import FetchError
from .models import UserRecord, parse_results

logger = logging.getLogger(__name__)


def build_url(count: int, api_url: str = DEFAULT_API_URL) -> str:
    # https://randomuser.me/api/?results=<N>, N as a decimal integer
    return f"{api_url}?results={int(count)}"


class RandomUserClient:
    """
    One GET per call, no retries, no caching.

    The session is injectable so tests can hand in a fake one.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        variant: Variant = Variant.EXTENDED,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.variant = variant
        self.session = session if session is not None else requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "RandomUserClient":
        return cls(api_url=settings.api_url, timeout=settings.timeout, variant=settings.variant, session=session)

    def fetch_users(self, count: int) -> List[UserRecord]:
        """Fetch ``count`` users; every failure comes out as FetchError."""
        url = build_url(count, self.api_url)
        logger.debug("GET %s", url)

        try:
            resp = self.session.get(url, timeout=self.timeout)
            # Sends an HTTP GET to Random User API asking for `count` users. The timeout stops a hung server from
            # holding one of FastAPI's worker threads forever.
            resp.raise_for_status()
            # If the server returned an error code (4xx/5xx), raise now instead of parsing an error page.
        except requests.RequestException as exc:
            raise FetchError(f"request for {count} users failed: {exc}", count=count, cause=exc) from exc

        try:
            data = resp.json() # Parses the JSON body (resp.json())
        except ValueError as exc:  # requests' JSONDecodeError is a ValueError
            raise FetchError(f"response for {count} users is not JSON", count=count, cause=exc) from exc

        try:
            users = parse_results(data, self.variant)
            # Extracts the "results" array and checks every entry has the fields this page variant shows.
        except FetchError as exc:
            exc.count = count # parse_results does not know how many users were asked for
            raise

        logger.debug("received %d users (status %s)", len(users), resp.status_code)
        return users

    def close(self) -> None:
        self.session.close()
