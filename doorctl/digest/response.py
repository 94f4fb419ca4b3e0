"""Digest response calculation (RFC 2617)."""

import hashlib
from typing import Callable, Dict, Optional

from .challenge import Challenge
from .exceptions import UnsupportedAlgorithm

DEFAULT_ALGORITHM = "MD5"

HashFactory = Callable[[bytes], "hashlib._Hash"]

HASH_ALGORITHMS: Dict[str, HashFactory] = {
    "MD5": hashlib.md5,
    "SHA": hashlib.sha1,
    "SHA-256": hashlib.sha256,
    "SHA-512": hashlib.sha512,
}


def register_algorithm(name: str, factory: HashFactory) -> None:
    """Register a hash function for a challenge algorithm name."""
    HASH_ALGORITHMS[name.upper()] = factory


def get_hash_function(algorithm: Optional[str] = None) -> Callable[[str], str]:
    """Return H(data) -> lowercase hex digest for the given algorithm."""
    name = (algorithm or DEFAULT_ALGORITHM).strip().upper()
    factory = HASH_ALGORITHMS.get(name)
    if factory is None:
        raise UnsupportedAlgorithm(algorithm or name)

    def hash_hex(data: str) -> str:
        return factory(data.encode("utf-8")).hexdigest()

    return hash_hex


def format_nonce_count(nonce_count: int) -> str:
    """Format nonce count as 8 lowercase hex digits."""
    return f"{nonce_count:08x}"


def compute_response(
    username: str,
    password: str,
    challenge: Challenge,
    nonce_count: int,
    cnonce: str,
    method: str,
    uri: str,
) -> str:
    """Compute digest authentication response hash."""
    hash_hex = get_hash_function(challenge.algorithm)

    ha1 = hash_hex(f"{username}:{challenge.realm}:{password}")
    ha2 = hash_hex(f"{method}:{uri}")

    if challenge.qop:
        nc = format_nonce_count(nonce_count)
        return hash_hex(f"{ha1}:{challenge.nonce}:{nc}:{cnonce}:{challenge.qop}:{ha2}")

    return hash_hex(f"{ha1}:{challenge.nonce}:{ha2}")
