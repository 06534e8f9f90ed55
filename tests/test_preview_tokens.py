from datetime import datetime, timedelta, timezone

import pytest

from app.application.preview.token_store import DatabaseTokenStore, MemoryTokenStore
from app.application.preview.tokens import (
    EXPIRED,
    SCOPE_MISMATCH,
    UNKNOWN,
    PreviewTokenService,
)
from app.models.preview_token import PreviewToken


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryTokenStore()


@pytest.fixture
def service(store, clock):
    return PreviewTokenService(store, ttl_seconds=900, clock=clock)


class TestIssue:
    def test_token_expires_after_ttl(self, service, clock):
        issued = service.issue_token("org", "page", "section-a")
        assert issued.expires_at == clock.now + timedelta(seconds=900)
        assert issued.to_dict()["expires_at"] == "2024-05-01T12:15:00+00:00"

    def test_tokens_are_unique_and_unguessable(self, service):
        first = service.issue_token("org", "page", "section-a")
        second = service.issue_token("org", "page", "section-a")
        assert first.token != second.token
        assert len(first.token) >= 32

    def test_scope_is_required(self, service):
        with pytest.raises(ValueError):
            service.issue_token("org", "page", "")

    def test_ttl_must_be_positive(self, store):
        with pytest.raises(ValueError):
            PreviewTokenService(store, ttl_seconds=0)


class TestValidate:
    def test_accepted_for_its_section(self, service):
        issued = service.issue_token("org", "page", "section-a")
        assert service.validate_token(issued.token, "org", "page", "section-a")

    def test_rejected_for_another_section(self, service):
        issued = service.issue_token("org", "page", "section-a")
        assert not service.validate_token(issued.token, "org", "page", "section-b")
        assert service.check_token(issued.token, "org", "page", "section-b") == SCOPE_MISMATCH

    def test_rejected_for_another_org_or_page(self, service):
        issued = service.issue_token("org", "page", "section-a")
        assert not service.validate_token(issued.token, "other-org", "page", "section-a")
        assert not service.validate_token(issued.token, "org", "other-page", "section-a")

    def test_unknown_token(self, service):
        assert service.check_token("nope", "org", "page", "section-a") == UNKNOWN
        assert service.check_token(None, "org", "page", "section-a") == UNKNOWN

    def test_valid_until_the_last_instant(self, service, clock):
        issued = service.issue_token("org", "page", "section-a")
        clock.advance(899)
        assert service.validate_token(issued.token, "org", "page", "section-a")

    def test_expired_at_expiry(self, service, clock):
        issued = service.issue_token("org", "page", "section-a")
        clock.advance(900)
        assert service.check_token(issued.token, "org", "page", "section-a") == EXPIRED

    def test_validation_does_not_consume(self, service):
        issued = service.issue_token("org", "page", "section-a")
        for _ in range(3):
            assert service.validate_token(issued.token, "org", "page", "section-a")

    def test_expired_token_is_pruned_on_sight(self, service, store, clock):
        issued = service.issue_token("org", "page", "section-a")
        clock.advance(901)
        service.validate_token(issued.token, "org", "page", "section-a")
        assert store.get(issued.token) is None

    def test_rejection_reason_is_logged(self, service, caplog):
        issued = service.issue_token("org", "page", "section-a")
        with caplog.at_level("WARNING"):
            service.validate_token(issued.token, "org", "page", "section-b")
        assert "scope_mismatch" in caplog.text


class TestPrune:
    def test_prune_removes_only_expired(self, service, store, clock):
        service.issue_token("org", "page", "section-a")
        clock.advance(600)
        fresh = service.issue_token("org", "page", "section-b")
        clock.advance(300)

        assert service.prune_expired() == 1
        assert len(store) == 1
        assert store.get(fresh.token) is not None


class TestDatabaseStore:
    @pytest.fixture
    def db_service(self, app, clock):
        return PreviewTokenService(DatabaseTokenStore(), ttl_seconds=900, clock=clock)

    def test_round_trip_through_the_table(self, db_service, tenant):
        issued = db_service.issue_token(tenant.id, "page", "section-a", issued_by="user-1")

        row = PreviewToken.query.filter_by(token=issued.token).one()
        assert row.issued_by == "user-1"
        assert db_service.validate_token(issued.token, tenant.id, "page", "section-a")
        assert not db_service.validate_token(issued.token, tenant.id, "page", "section-b")

    def test_expiry_and_prune(self, db_service, tenant, clock):
        stale = db_service.issue_token(tenant.id, "page", "section-a")
        clock.advance(600)
        db_service.issue_token(tenant.id, "page", "section-b")
        clock.advance(300)

        assert not db_service.validate_token(stale.token, tenant.id, "page", "section-a")
        assert PreviewToken.query.filter_by(token=stale.token).count() == 0
        assert db_service.prune_expired() == 0
        assert PreviewToken.query.count() == 1

    def test_cli_prune(self, app, tenant):
        service = app.extensions["preview_tokens"]
        service.issue_token(tenant.id, "page", "section-a")

        result = app.test_cli_runner().invoke(args=["preview-tokens", "prune"])

        assert result.exit_code == 0
        assert "Pruned 0 expired preview tokens" in result.output
