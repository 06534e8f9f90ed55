import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from app.extensions import db
from app.models.page import Page
from app.models.tenant import Tenant
from app.models.user import User
from app.application.cms.create_section import create_section


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tenant(app):
    tenant = Tenant()
    tenant.name = "Johnny G's"
    tenant.slug = "johnny-gs"
    tenant.site_base_url = "https://johnnygs.example"
    db.session.add(tenant)
    db.session.commit()
    return tenant


@pytest.fixture
def other_tenant(app):
    tenant = Tenant()
    tenant.name = "Luxivie"
    tenant.slug = "luxivie"
    db.session.add(tenant)
    db.session.commit()
    return tenant


def _user(tenant, email, role):
    user = User()
    user.tenant_id = tenant.id
    user.email = email
    user.role = role
    user.set_password("correct horse")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def editor(tenant):
    return _user(tenant, "editor@johnnygs.example", "editor")


@pytest.fixture
def viewer(tenant):
    return _user(tenant, "viewer@johnnygs.example", "viewer")


def auth_headers(user):
    token = create_access_token(
        identity=user.id,
        additional_claims={"tenant_id": user.tenant_id, "role": user.role},
    )
    return {"X-Tenant-ID": user.tenant_id, "Authorization": f"Bearer {token}"}


@pytest.fixture
def editor_headers(editor):
    return auth_headers(editor)


@pytest.fixture
def viewer_headers(viewer):
    return auth_headers(viewer)


@pytest.fixture
def page(tenant):
    page = Page()
    page.tenant_id = tenant.id
    page.title = "Home"
    page.slug = "home"
    db.session.add(page)
    db.session.commit()
    return page


@pytest.fixture
def make_section(tenant, page):
    def _make(key="promo", component="PromoCard", content=None, target_page=None):
        return create_section(
            tenant_id=tenant.id,
            page_id=(target_page or page).id,
            actor_id=None,
            data={"key": key, "component": component, "label": key.title(), "content": content},
        )
    return _make


class FailingCommit:
    """Stands in for session.commit and fails like a lost database write."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        from sqlalchemy.exc import OperationalError
        self.calls += 1
        raise OperationalError("UPDATE sections", {}, Exception("database is locked"))


@pytest.fixture
def break_commits(monkeypatch):
    """Call to make every following commit fail."""
    def _break():
        failing = FailingCommit()
        monkeypatch.setattr(db.session, "commit", failing)
        return failing
    return _break


@pytest.fixture
def outsider_headers(other_tenant):
    """An editor of another organization."""
    return auth_headers(_user(other_tenant, "editor@luxivie.example", "editor"))
