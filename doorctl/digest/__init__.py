"""HTTP Digest authentication engine."""

from .cache import CacheState, ChallengeCache
from .challenge import Challenge, find_digest_challenge, parse_challenge
from .client import Credentials, DigestAuthClient, build_authorization_header
from .exceptions import (
    DigestAuthError,
    InvalidChallenge,
    MissingAuthHeader,
    NoChallengeAvailable,
    ProbeFailed,
    UnsupportedAlgorithm,
    UnsupportedScheme,
)
from .response import compute_response, format_nonce_count, register_algorithm

__all__ = [
    "CacheState",
    "Challenge",
    "ChallengeCache",
    "Credentials",
    "DigestAuthClient",
    "DigestAuthError",
    "InvalidChallenge",
    "MissingAuthHeader",
    "NoChallengeAvailable",
    "ProbeFailed",
    "UnsupportedAlgorithm",
    "UnsupportedScheme",
    "build_authorization_header",
    "compute_response",
    "find_digest_challenge",
    "format_nonce_count",
    "parse_challenge",
    "register_algorithm",
]
