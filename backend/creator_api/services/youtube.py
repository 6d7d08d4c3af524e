"""YouTube Data API client for a channel's live subscriber count.

One request per call, no retries. Every failure mode is raised as a
``FetchError`` subclass so callers can decide on a fallback.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

YOUTUBE_CHANNELS_URL = "https://www.googleapis.com/youtube/v3/channels"


class FetchError(Exception):
    """Upstream statistics call did not produce a subscriber count."""


class FetchTransportError(FetchError):
    """Network failure or timeout talking to the upstream API."""


class FetchStatusError(FetchError):
    def __init__(self, status_code: int):
        super().__init__(f"YouTube API returned HTTP {status_code}")
        self.status_code = status_code


class FetchParseError(FetchError):
    """Response body did not contain a usable integer count."""


class YouTubeSubscriberFetcher:
    def __init__(
        self,
        api_key: str | None,
        channel_id: str,
        api_url: str = YOUTUBE_CHANNELS_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.channel_id = channel_id
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> int:
        """Fetch the current subscriber count for the configured channel."""
        if not self.api_key:
            raise FetchError("YOUTUBE_API_KEY is not configured")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                resp = await client.get(
                    self.api_url,
                    params={
                        "part": "statistics",
                        "id": self.channel_id,
                        "key": self.api_key,
                    },
                )
            except httpx.HTTPError as e:
                raise FetchTransportError(f"YouTube API request failed: {e}") from e

        if not resp.is_success:
            raise FetchStatusError(resp.status_code)

        return _parse_subscriber_count(resp)


def _parse_subscriber_count(resp: httpx.Response) -> int:
    """Pull items[0].statistics.subscriberCount out of a channels.list response.

    The API reports counts as decimal strings ("1000").
    """
    try:
        data = resp.json()
        raw = data["items"][0]["statistics"]["subscriberCount"]
    except ValueError as e:
        raise FetchParseError(f"YouTube API returned invalid JSON: {e}") from e
    except (KeyError, IndexError, TypeError) as e:
        raise FetchParseError(f"YouTube API response missing subscriberCount: {e!r}") from e

    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise FetchParseError(f"Unexpected subscriberCount value: {raw!r}")
    try:
        count = int(raw)
    except (TypeError, ValueError, OverflowError) as e:
        raise FetchParseError(f"Unexpected subscriberCount value: {raw!r}") from e
    if count < 0:
        raise FetchParseError(f"Negative subscriberCount: {count}")
    return count
