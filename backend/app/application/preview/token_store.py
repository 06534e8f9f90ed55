# app/application/preview/token_store.py
"""
Storage backends for preview tokens.

Tokens only live until they expire, so any store that can put, get and
delete by token string works. The database store is the default because
dashboard workers do not share memory; the in-memory store suits a single
process and tests.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Protocol

from app.extensions import db
from app.models.preview_token import PreviewToken
from app.utils.clock import normalize_ts
from app.utils.transaction import transactional


@dataclass(frozen=True)
class TokenGrant:
    """What a preview token was issued for."""

    token: str
    org_id: str
    page_id: str
    section_id: str
    issued_at: datetime
    expires_at: datetime
    issued_by: Optional[str] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def matches(self, org_id: str, page_id: str, section_id: str) -> bool:
        return (self.org_id, self.page_id, self.section_id) == (org_id, page_id, section_id)


class PreviewTokenStore(Protocol):
    def save(self, grant: TokenGrant) -> None:
        ...

    def get(self, token: str) -> Optional[TokenGrant]:
        ...

    def delete(self, token: str) -> None:
        ...

    def prune_expired(self, now: datetime) -> int:
        """Delete every grant expired at ``now``; returns how many."""
        ...


class MemoryTokenStore:
    def __init__(self):
        self._grants: Dict[str, TokenGrant] = {}
        self._lock = threading.Lock()

    def save(self, grant: TokenGrant) -> None:
        with self._lock:
            self._grants[grant.token] = grant

    def get(self, token: str) -> Optional[TokenGrant]:
        with self._lock:
            return self._grants.get(token)

    def delete(self, token: str) -> None:
        with self._lock:
            self._grants.pop(token, None)

    def prune_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [t for t, g in self._grants.items() if g.is_expired(now)]
            for token in expired:
                del self._grants[token]
        return len(expired)

    def __len__(self):
        return len(self._grants)


class DatabaseTokenStore:
    """Backed by the preview_tokens table; needs an app context."""

    def save(self, grant: TokenGrant) -> None:
        row = PreviewToken()
        row.token = grant.token
        row.tenant_id = grant.org_id
        row.page_id = grant.page_id
        row.section_id = grant.section_id
        row.issued_at = grant.issued_at
        row.expires_at = grant.expires_at
        row.issued_by = grant.issued_by

        with transactional():
            db.session.add(row)

    def get(self, token: str) -> Optional[TokenGrant]:
        row = PreviewToken.query.filter_by(token=token).first()
        if row is None:
            return None

        return TokenGrant(
            token=row.token,
            org_id=row.tenant_id,
            page_id=row.page_id,
            section_id=row.section_id,
            issued_at=normalize_ts(row.issued_at),
            expires_at=normalize_ts(row.expires_at),
            issued_by=row.issued_by,
        )

    def delete(self, token: str) -> None:
        with transactional():
            PreviewToken.query.filter_by(token=token).delete(synchronize_session=False)

    def prune_expired(self, now: datetime) -> int:
        with transactional():
            count = (
                PreviewToken.query
                .filter(PreviewToken.expires_at <= now)
                .delete(synchronize_session=False)
            )
        return count
