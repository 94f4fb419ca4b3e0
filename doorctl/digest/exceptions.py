"""Digest authentication errors."""

from typing import Optional


class DigestAuthError(Exception):
    """Digest authentication protocol error."""
    pass


class InvalidChallenge(DigestAuthError):
    """Challenge is missing realm or nonce."""
    pass


class ProbeFailed(DigestAuthError):
    """Unauthenticated probe did not answer with 401."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"Expected 401 status code but got {status_code}")


class MissingAuthHeader(DigestAuthError):
    """Probe answered 401 without a WWW-Authenticate header."""
    pass


class UnsupportedScheme(DigestAuthError):
    """WWW-Authenticate does not offer the Digest scheme."""
    pass


class UnsupportedAlgorithm(DigestAuthError):
    """Challenge requests a hash algorithm that is not registered."""

    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        super().__init__(f"Unsupported digest algorithm: {algorithm}")


class NoChallengeAvailable(DigestAuthError):
    """A response was requested while no challenge is cached."""
    pass
