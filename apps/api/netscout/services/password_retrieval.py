"""
password_retrieval.py — Simulated community-password lookup.

There is no real database behind this. The answer is a closed-form function
of what the resolver already knows about the hotspot; the sleep only models
lookup latency so the client can show a "retrieving" state.
"""

import asyncio
import logging
from typing import Optional

from netscout.core.config import settings
from netscout.models.hotspot import Hotspot, RetrievalOutcome, SecurityType

logger = logging.getLogger(__name__)

PUBLIC_NETWORK_MESSAGE = (
    "This is a public network. No password required, but web authentication may be needed."
)
SHARED_PASSWORD_MESSAGE = (
    "Password retrieved from community-shared database. Please use responsibly."
)
NOT_FOUND_MESSAGE = (
    "No community-shared password found for this private network. "
    "We do not support unauthorized access to private networks."
)

_OPEN_NETWORKS = (SecurityType.OPEN, SecurityType.PUBLIC)


class PasswordRetriever:
    def __init__(self, delay_seconds: Optional[float] = None) -> None:
        self._delay_seconds = delay_seconds

    @property
    def delay_seconds(self) -> float:
        if self._delay_seconds is not None:
            return self._delay_seconds
        return settings.retrieval_delay_seconds

    async def retrieve(self, hotspot: Hotspot) -> RetrievalOutcome:
        """Look up the community password for *hotspot*."""
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if hotspot.security in _OPEN_NETWORKS:
            return RetrievalOutcome(message=PUBLIC_NETWORK_MESSAGE)

        if hotspot.password:
            logger.info("Community password found for %s", hotspot.name)
            return RetrievalOutcome(password=hotspot.password, message=SHARED_PASSWORD_MESSAGE)

        return RetrievalOutcome(message=NOT_FOUND_MESSAGE)


password_retriever = PasswordRetriever()
