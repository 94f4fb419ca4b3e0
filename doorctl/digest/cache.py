"""Cached Digest challenge and nonce count state."""

import logging
from enum import Enum
from typing import Optional, Tuple

from .challenge import Challenge
from .exceptions import NoChallengeAvailable

logger = logging.getLogger(__name__)

DEFAULT_MAX_NONCE_COUNT = 9999


class CacheState(str, Enum):
    """Challenge cache state."""
    EMPTY = "empty"
    ACTIVE = "active"


class ChallengeCache:
    """
    Holds the current challenge and its nonce count.

    All mutation goes through install/reuse/rollover/invalidate. Callers
    sharing one cache must serialize these calls (DigestAuthClient holds
    a lock around them).
    """

    def __init__(self, max_nonce_count: int = DEFAULT_MAX_NONCE_COUNT):
        if max_nonce_count < 1:
            raise ValueError("max_nonce_count must be at least 1")
        self.max_nonce_count = max_nonce_count
        self._challenge: Optional[Challenge] = None
        self._nonce_count = 0

    @property
    def state(self) -> CacheState:
        return CacheState.EMPTY if self._challenge is None else CacheState.ACTIVE

    @property
    def challenge(self) -> Optional[Challenge]:
        return self._challenge

    @property
    def nonce_count(self) -> int:
        return self._nonce_count

    @property
    def needs_refresh(self) -> bool:
        """True when the next request must acquire a new challenge."""
        return self._challenge is None or self._nonce_count >= self.max_nonce_count

    def install(self, challenge: Challenge) -> Tuple[Challenge, int]:
        """Empty -> Active(challenge, nc=1)."""
        self._challenge = challenge
        self._nonce_count = 1
        return challenge, self._nonce_count

    def reuse(self) -> Tuple[Challenge, int]:
        """Active -> Active(challenge, nc+1)."""
        if self._challenge is None:
            raise NoChallengeAvailable("No valid digest challenge available")
        self._nonce_count += 1
        logger.debug(f"Reusing digest challenge, nc={self._nonce_count}")
        return self._challenge, self._nonce_count

    def rollover(self) -> None:
        """Active -> Empty once the nonce count ceiling is reached."""
        if self._challenge is not None and self._nonce_count >= self.max_nonce_count:
            logger.info(f"Nonce count reached {self.max_nonce_count}, refreshing challenge")
            self._reset()

    def invalidate(self, challenge: Optional[Challenge] = None) -> bool:
        """
        Active -> Empty, nc=0.

        If challenge is given and is no longer the installed one, nothing
        changes. Returns True if the cache was cleared.
        """
        if self._challenge is None:
            return False
        if challenge is not None and challenge is not self._challenge:
            return False
        self._reset()
        return True

    def _reset(self) -> None:
        self._challenge = None
        self._nonce_count = 0
