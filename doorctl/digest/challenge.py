"""WWW-Authenticate Digest challenge parsing (RFC 2617)."""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .exceptions import InvalidChallenge, UnsupportedScheme

# key="quoted value" or key=unquoted value (runs to the next comma)
_PARAM_PATTERN = re.compile(r'(\w+)\s*=\s*(?:"([^"]*)"|([^,]*))')
_SCHEME_PREFIX = re.compile(r'\s*digest\s+', re.IGNORECASE)
# Comma-separated items, commas inside quoted strings kept
_ITEM_PATTERN = re.compile(r'(?:[^,"]|"[^"]*")+')
# An item that opens a challenge: auth-scheme token, then optional first param
_SCHEME_ITEM = re.compile(r"([\w!#$%&'*+.^`|~-]+)(?:\s+(?![\s=])(.*))?", re.DOTALL)

CHALLENGE_FIELDS = ("realm", "nonce", "qop", "opaque", "algorithm")


@dataclass(frozen=True)
class Challenge:
    """Parsed Digest challenge."""
    realm: str
    nonce: str
    qop: Optional[str] = None
    opaque: Optional[str] = None
    algorithm: Optional[str] = None


def parse_challenge(header: str) -> Challenge:
    """Parse the value of a WWW-Authenticate Digest header."""
    match = _SCHEME_PREFIX.match(header)
    if match:
        header = header[match.end():]

    params = {}
    for match in _PARAM_PATTERN.finditer(header):
        key = match.group(1).lower()
        if key not in CHALLENGE_FIELDS:
            continue
        if match.group(2) is not None:
            params[key] = match.group(2)
        else:
            params[key] = match.group(3).strip()

    realm = params.get("realm", "")
    nonce = params.get("nonce", "")
    if not realm.strip() or not nonce.strip():
        raise InvalidChallenge(f"Invalid digest challenge: realm and nonce are required, got {sorted(params)}")

    return Challenge(
        realm=realm,
        nonce=nonce,
        qop=params.get("qop"),
        opaque=params.get("opaque"),
        algorithm=params.get("algorithm"),
    )


def find_digest_challenge(headers: Union[str, Iterable[str]]) -> str:
    """
    Locate the Digest challenge among WWW-Authenticate values.

    Devices may offer several schemes, either as separate headers or
    comma-joined in one. Returns the text after the "Digest" token.
    """
    headers = [headers] if isinstance(headers, str) else list(headers)

    for value in headers:
        for scheme, params in _split_challenges(value):
            if scheme.lower() == "digest":
                return ", ".join(params)

    raise UnsupportedScheme(f"Invalid authentication type: {', '.join(headers)}")


def _split_challenges(value: str) -> list[tuple[str, list[str]]]:
    """Split one WWW-Authenticate value into (scheme, params) challenges."""
    challenges: list[tuple[str, list[str]]] = []
    for item in _ITEM_PATTERN.findall(value):
        item = item.strip()
        if not item:
            continue
        match = _SCHEME_ITEM.fullmatch(item)
        if match:
            params = [match.group(2)] if match.group(2) else []
            challenges.append((match.group(1), params))
        elif challenges:
            challenges[-1][1].append(item)
    return challenges
