# app/application/preview/tokens.py
"""
Preview token service.

A preview token lets the public site fetch the *draft* content of exactly
one (organization, page, section) for a few minutes, so an editor can see
unpublished changes rendered for real.

Validation never says why a token failed; the reason only goes to the log.
Tokens are not consumed by validation: a preview frame may reload many
times within one editing session.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from flask import current_app

from app.utils.clock import utc_now
from .token_store import DatabaseTokenStore, MemoryTokenStore, PreviewTokenStore, TokenGrant

DEFAULT_TTL_SECONDS = 900

# Rejection reasons (logs only)
UNKNOWN = "unknown"
EXPIRED = "expired"
SCOPE_MISMATCH = "scope_mismatch"


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime

    def to_dict(self):
        return {"token": self.token, "expires_at": self.expires_at.isoformat()}


class PreviewTokenService:
    def __init__(
        self,
        store: PreviewTokenStore,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self.store = store
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_app(cls, app):
        kind = app.config.get("PREVIEW_TOKEN_STORE", "database")
        if kind == "memory":
            store = MemoryTokenStore()
        elif kind == "database":
            store = DatabaseTokenStore()
        else:
            raise ValueError(f"Unknown PREVIEW_TOKEN_STORE: {kind}")

        return cls(
            store,
            ttl_seconds=app.config.get("PREVIEW_TOKEN_TTL_SECONDS", DEFAULT_TTL_SECONDS),
            logger=app.logger,
        )

    def issue_token(
        self,
        org_id: str,
        page_id: str,
        section_id: str,
        *,
        issued_by: Optional[str] = None,
    ) -> IssuedToken:
        if not (org_id and page_id and section_id):
            raise ValueError("org_id, page_id and section_id are required")

        now = self.clock()
        grant = TokenGrant(
            token=secrets.token_urlsafe(32),
            org_id=org_id,
            page_id=page_id,
            section_id=section_id,
            issued_at=now,
            expires_at=now + self.ttl,
            issued_by=issued_by,
        )
        self.store.save(grant)

        self.logger.info(
            f"Preview token issued for section {section_id} (page {page_id}), expires {grant.expires_at.isoformat()}"
        )
        return IssuedToken(grant.token, grant.expires_at)

    def check_token(
        self,
        token: Optional[str],
        org_id: str,
        page_id: str,
        section_id: str,
    ) -> Optional[str]:
        """
        Returns None when the token is accepted, else the rejection reason.
        """
        grant = self.store.get(token) if token else None

        if grant is None:
            return UNKNOWN

        if grant.is_expired(self.clock()):
            # Lazy pruning keeps the store bounded
            self.store.delete(grant.token)
            return EXPIRED

        if not grant.matches(org_id, page_id, section_id):
            return SCOPE_MISMATCH

        return None

    def validate_token(
        self,
        token: Optional[str],
        org_id: str,
        page_id: str,
        section_id: str,
    ) -> bool:
        reason = self.check_token(token, org_id, page_id, section_id)
        if reason is None:
            return True

        self.logger.warning(
            f"Preview token rejected ({reason}) for section {section_id} (page {page_id}, org {org_id})"
        )
        return False

    def prune_expired(self) -> int:
        count = self.store.prune_expired(self.clock())
        self.logger.info(f"Pruned {count} expired preview tokens")
        return count


def get_preview_tokens() -> PreviewTokenService:
    return current_app.extensions["preview_tokens"]
