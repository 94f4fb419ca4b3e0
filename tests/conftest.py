"""Shared fixtures: a fake Digest-protected access-control device."""

import asyncio
import hashlib
import re
from typing import Optional

import httpx
import pytest

AUTH_PARAM = re.compile(r'(\w+)=(?:"([^"]*)"|([^,\s]+))')


def parse_authorization(header: str) -> dict:
    """Split an Authorization: Digest header into its directives."""
    assert header.startswith("Digest ")
    return {
        m.group(1): m.group(2) if m.group(2) is not None else m.group(3)
        for m in AUTH_PARAM.finditer(header[len("Digest "):])
    }


def md5_hex(data: str) -> str:
    return hashlib.md5(data.encode("utf-8")).hexdigest()


class FakeDevice:
    """Answers unauthenticated requests with a Digest challenge."""

    def __init__(
        self,
        username: str = "admin",
        password: str = "secret",
        realm: str = "DS-K1T671",
        nonces: Optional[list] = None,
        qop: Optional[str] = "auth",
        opaque: Optional[str] = None,
        probe_status: int = 401,
        www_authenticate: Optional[str] = None,
        send_challenge: bool = True,
        auth_status: int = 200,
        probe_delay: float = 0.0,
    ):
        self.username = username
        self.password = password
        self.realm = realm
        self.nonces = list(nonces or ["nonce-1", "nonce-2", "nonce-3"])
        self.qop = qop
        self.opaque = opaque
        self.probe_status = probe_status
        self.www_authenticate = www_authenticate
        self.send_challenge = send_challenge
        self.auth_status = auth_status
        self.probe_delay = probe_delay

        self.probes: list[httpx.Request] = []
        self.authorized: list[httpx.Request] = []
        self.current_nonce: Optional[str] = None

    def challenge_header(self) -> str:
        if self.www_authenticate is not None:
            return self.www_authenticate
        parts = [f'realm="{self.realm}"', f'nonce="{self.current_nonce}"']
        if self.qop:
            parts.append(f'qop="{self.qop}"')
        if self.opaque:
            parts.append(f'opaque="{self.opaque}"')
        return "Digest " + ", ".join(parts)

    def expected_response(self, params: dict, method: str) -> str:
        ha1 = md5_hex(f"{self.username}:{self.realm}:{self.password}")
        ha2 = md5_hex(f"{method}:{params['uri']}")
        if "qop" in params:
            return md5_hex(
                f"{ha1}:{params['nonce']}:{params['nc']}:{params['cnonce']}:{params['qop']}:{ha2}"
            )
        return md5_hex(f"{ha1}:{params['nonce']}:{ha2}")

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if "authorization" not in request.headers:
            self.probes.append(request)
            self.current_nonce = self.nonces[(len(self.probes) - 1) % len(self.nonces)]
            if self.probe_delay:
                await asyncio.sleep(self.probe_delay)
            headers = {}
            if self.send_challenge:
                headers["WWW-Authenticate"] = self.challenge_header()
            return httpx.Response(self.probe_status, headers=headers)

        self.authorized.append(request)
        params = parse_authorization(request.headers["authorization"])
        valid = (
            params.get("realm") == self.realm
            and params.get("nonce") == self.current_nonce
            and params.get("response") == self.expected_response(params, request.method)
        )
        if not valid or self.auth_status == 401:
            return httpx.Response(401, headers={"WWW-Authenticate": self.challenge_header()})
        return httpx.Response(self.auth_status, text="<ResponseStatus><statusCode>1</statusCode></ResponseStatus>")

    def authorization_params(self) -> list[dict]:
        return [parse_authorization(r.headers["authorization"]) for r in self.authorized]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def device():
    """Fake device with default challenge."""
    return FakeDevice()
