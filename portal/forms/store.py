"""
portal.forms.store: Wizard drafts between requests.

A draft is the wizard's ``to_dict()`` kept in the cache backend under
``wizard:<session id>:<form key>``.  Drafts expire with the session and are
dropped on logout; nothing is shared across sessions.
"""

from __future__ import annotations

import logging
from typing import Optional, Type

from portal import config
from portal.cache_backend import CacheBackend, get_cache_backend
from portal.forms.wizard import StepForm

logger = logging.getLogger(__name__)

_PREFIX = "wizard"


class WizardStore:
    def __init__(self, cache: Optional[CacheBackend] = None) -> None:
        self._cache = cache

    @property
    def cache(self) -> CacheBackend:
        return self._cache or get_cache_backend()

    @staticmethod
    def _key(session_id: str, form_key: str) -> str:
        return f"{_PREFIX}:{session_id}:{form_key}"

    def load(self, session_id: str, form_key: str, form_cls: Type[StepForm]) -> Optional[StepForm]:
        data = self.cache.get_json(self._key(session_id, form_key))
        if not isinstance(data, dict):
            return None
        if data.get("form_type") != form_cls.form_type.value:
            logger.warning("Discarding draft %s: stored type %s", form_key, data.get("form_type"))
            return None
        return form_cls.from_dict(data)

    def save(self, session_id: str, form_key: str, form: StepForm) -> None:
        self.cache.set_json(
            self._key(session_id, form_key), form.to_dict(), ttl_seconds=config.SESSION_EXPIRY_SECONDS,
        )

    def discard(self, session_id: str, form_key: str) -> None:
        self.cache.delete(self._key(session_id, form_key))

    def clear_session(self, session_id: str) -> int:
        removed = self.cache.delete_prefix(f"{_PREFIX}:{session_id}:")
        if removed:
            logger.info("Dropped %d wizard draft(s) for session %s", removed, session_id)
        return removed
