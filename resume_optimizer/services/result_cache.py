"""In-memory cache of optimization results keyed by resume + JD content."""

import hashlib
import logging
import time
from collections.abc import Callable

from resume_optimizer.config import settings
from resume_optimizer.models.responses import OptimizationResult
from resume_optimizer.models.schemas.resume_document import ResumeDocument

logger = logging.getLogger(__name__)


class ResultCache:
    """Maps sha256(resume JSON + JD) to (result, stored_at).

    Entries older than ``ttl_seconds`` are treated as missing. They are
    dropped when read, and every write sweeps out the rest. Writing the same
    key twice just replaces the entry.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[OptimizationResult, float]] = {}

    @staticmethod
    def make_key(resume: ResumeDocument, job_description: str) -> str:
        payload = resume.model_dump_json() + "\x00" + job_description
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def get(self, key: str) -> OptimizationResult | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        result, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key[:12])
            return None
        return result

    def set(self, key: str, result: OptimizationResult) -> None:
        now = self._clock()
        self._purge(now)
        self._entries[key] = (result, now)

    def _purge(self, now: float) -> None:
        expired = [k for k, (_, stored_at) in self._entries.items() if now - stored_at >= self.ttl_seconds]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
