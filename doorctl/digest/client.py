"""Async HTTP client that authenticates requests with Digest auth."""

import asyncio
import logging
import secrets
from dataclasses import dataclass, field
from typing import Optional, Tuple

import httpx

from .cache import DEFAULT_MAX_NONCE_COUNT, ChallengeCache
from .challenge import Challenge, find_digest_challenge, parse_challenge
from .exceptions import MissingAuthHeader, ProbeFailed
from .response import compute_response, format_nonce_count, get_hash_function

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0
DEFAULT_REQUEST_TIMEOUT = 10.0
CNONCE_BYTES = 8


@dataclass(frozen=True)
class Credentials:
    """Digest username and password."""
    username: str
    password: str = field(repr=False)


def generate_cnonce() -> str:
    """Generate a random client nonce (hex)."""
    return secrets.token_hex(CNONCE_BYTES)


def request_uri(url: httpx.URL) -> str:
    """Digest URI for a request: path and query, never scheme or host."""
    return url.raw_path.decode("ascii") or "/"


def build_authorization_header(
    username: str,
    challenge: Challenge,
    uri: str,
    response: str,
    nonce_count: int,
    cnonce: str,
) -> str:
    """Build Authorization header value for digest auth."""
    parts = [
        f'username="{username}"',
        f'realm="{challenge.realm}"',
        f'nonce="{challenge.nonce}"',
        f'uri="{uri}"',
        f'response="{response}"',
    ]

    if challenge.qop:
        parts.extend([
            f"qop={challenge.qop}",
            f"nc={format_nonce_count(nonce_count)}",
            f'cnonce="{cnonce}"',
        ])

    if challenge.opaque:
        parts.append(f'opaque="{challenge.opaque}"')

    if challenge.algorithm:
        parts.append(f"algorithm={challenge.algorithm}")

    return "Digest " + ", ".join(parts)


class DigestAuthClient:
    """
    Sends requests to a Digest-protected device.

    The first request (and any request after a 401 or once the nonce count
    ceiling is hit) is preceded by an unauthenticated probe that fetches a
    fresh challenge. The challenge is cached and reused with an increasing
    nonce count. A 401 on an authenticated request clears the cache so the
    next call probes again; the failed request is not resent.
    """

    def __init__(
        self,
        username: str,
        password: str,
        base_url: str = "",
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        max_nonce_count: int = DEFAULT_MAX_NONCE_COUNT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._credentials = Credentials(username=username, password=password)
        self.probe_timeout = probe_timeout
        self._cache = ChallengeCache(max_nonce_count=max_nonce_count)
        self._lock = asyncio.Lock()

        if http_client is not None:
            self._http = http_client
            self._owns_http = False
        else:
            self._http = httpx.AsyncClient(
                base_url=base_url,
                timeout=request_timeout,
                transport=transport,
            )
            self._owns_http = True

    @property
    def cache(self) -> ChallengeCache:
        """Challenge cache for this client."""
        return self._cache

    async def __aenter__(self) -> "DigestAuthClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Build a request (relative URLs join base_url) and perform it."""
        request = self._http.build_request(method, url, **kwargs)
        return await self.perform(request)

    async def perform(self, request: httpx.Request) -> httpx.Response:
        """
        Authenticate and send a request.

        Args:
            request: Request built by any httpx client; the URL must be absolute

        Returns:
            The device response, unmodified (including 401)

        Raises:
            DigestAuthError subclasses for protocol failures; httpx transport
            errors propagate unchanged.
        """
        challenge, nonce_count = await self._reserve_nonce(request)

        cnonce = generate_cnonce()
        uri = request_uri(request.url)
        response_hash = compute_response(
            username=self._credentials.username,
            password=self._credentials.password,
            challenge=challenge,
            nonce_count=nonce_count,
            cnonce=cnonce,
            method=request.method,
            uri=uri,
        )

        request.headers["Authorization"] = build_authorization_header(
            username=self._credentials.username,
            challenge=challenge,
            uri=uri,
            response=response_hash,
            nonce_count=nonce_count,
            cnonce=cnonce,
        )

        # Requests built outside this client carry no timeout of their own
        request.extensions.setdefault("timeout", self._http.timeout.as_dict())
        response = await self._http.send(request)

        if response.status_code == 401 and self._cache.invalidate(challenge):
            logger.info("Auth failed with 401, clearing cached challenge")

        return response

    async def _reserve_nonce(self, request: httpx.Request) -> Tuple[Challenge, int]:
        """Return the challenge and a nonce count no other caller will get."""
        async with self._lock:
            if self._cache.needs_refresh:
                self._cache.rollover()
                challenge = await self._acquire_challenge(request)
                return self._cache.install(challenge)
            return self._cache.reuse()

    async def _acquire_challenge(self, request: httpx.Request) -> Challenge:
        """Probe the device without credentials and parse its challenge."""
        logger.info(f"Requesting new digest challenge: {request.method} {request.url}")

        response = await self._http.request(
            request.method,
            request.url,
            follow_redirects=False,
            timeout=self.probe_timeout,
        )

        if response.status_code != 401:
            logger.warning(f"Challenge probe returned {response.status_code}, expected 401")
            raise ProbeFailed(response.status_code)

        values = response.headers.get_list("www-authenticate")
        if not values:
            raise MissingAuthHeader("Missing WWW-Authenticate header")

        challenge = parse_challenge(find_digest_challenge(values))
        # Reject unknown algorithms before the challenge is cached
        get_hash_function(challenge.algorithm)

        logger.info(f"Digest challenge acquired for realm '{challenge.realm}'")
        return challenge
