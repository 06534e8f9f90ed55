import pytest

from app.application.cms.publish_section import publish_section
from app.extensions import db
from app.models.preview_token import PreviewToken

API = "/api/v1"


def _publish(section):
    publish_section(tenant_id=section.tenant_id, section_id=section.id, actor_id=None)


class TestPublicRoutes:
    def test_health_needs_no_tenant(self, client):
        response = client.get(f"{API}/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"

    def test_openapi_document_is_served(self, client):
        response = client.get("/openapi/cms.yaml")
        assert response.status_code == 200
        assert b"/sections/{section_id}/publish" in response.data

    def test_tenant_header_required(self, client):
        response = client.get(f"{API}/components")
        assert response.status_code == 400

    def test_unknown_tenant(self, client):
        response = client.get(f"{API}/components", headers={"X-Tenant-ID": "nope"})
        assert response.status_code == 404


class TestAuth:
    def test_login_returns_tokens(self, client, editor, tenant):
        response = client.post(
            f"{API}/auth/login",
            json={"email": editor.email, "password": "correct horse"},
            headers={"X-Tenant-ID": tenant.id},
        )
        assert response.status_code == 200
        assert "access_token" in response.get_json()

    def test_wrong_password(self, client, editor, tenant):
        response = client.post(
            f"{API}/auth/login",
            json={"email": editor.email, "password": "battery staple"},
            headers={"X-Tenant-ID": tenant.id},
        )
        assert response.status_code == 401

    def test_token_from_another_tenant_is_refused(self, client, editor_headers, other_tenant):
        headers = {**editor_headers, "X-Tenant-ID": other_tenant.id}
        response = client.get(f"{API}/components", headers=headers)
        assert response.status_code == 403


class TestComponents:
    def test_list(self, client, editor_headers):
        response = client.get(f"{API}/components", headers=editor_headers)
        types = [c["type"] for c in response.get_json()]
        assert "PromoCard" in types

    def test_schema(self, client, editor_headers):
        response = client.get(f"{API}/components/PromoCard/schema", headers=editor_headers)
        fields = response.get_json()["fields"]
        assert fields["ctaLabel"] == {"type": "string", "default": "ORDER NOW", "label": "Button label"}

    def test_normalize_needs_an_object_body(self, client, editor_headers):
        response = client.post(
            f"{API}/components/PromoCard/normalize", json=[1, 2], headers=editor_headers
        )
        assert response.status_code == 400

    def test_unknown_schema(self, client, editor_headers):
        response = client.get(f"{API}/components/Nope/schema", headers=editor_headers)
        assert response.status_code == 404

    def test_normalize(self, client, editor_headers):
        response = client.post(
            f"{API}/components/PromoCard/normalize",
            json={"content": {"eyebrow": "SPECIAL"}},
            headers=editor_headers,
        )
        content = response.get_json()["content"]
        assert content["eyebrow"] == "SPECIAL"
        assert content["ctaLabel"] == "ORDER NOW"


class TestPages:
    def test_create_and_list(self, client, editor_headers):
        response = client.post(
            f"{API}/pages", json={"title": "Menu", "slug": "menu"}, headers=editor_headers
        )
        assert response.status_code == 201

        listing = client.get(f"{API}/pages", headers=editor_headers).get_json()
        assert [p["slug"] for p in listing["items"]] == ["menu"]
        assert listing["pagination"]["total"] == 1

    def test_duplicate_slug(self, client, editor_headers, page):
        response = client.post(
            f"{API}/pages", json={"title": "Home", "slug": "home"}, headers=editor_headers
        )
        assert response.status_code == 409


class TestSections:
    def test_create_section(self, client, editor_headers, page):
        response = client.post(
            f"{API}/pages/{page.id}/sections",
            json={"key": "promo", "component": "PromoCard", "content": {"eyebrow": "SPECIAL"}},
            headers=editor_headers,
        )
        body = response.get_json()
        assert response.status_code == 201
        assert body["status"] == "draft"
        assert body["draft_content"]["ctaLabel"] == "ORDER NOW"

    def test_duplicate_key(self, client, editor_headers, page, make_section):
        make_section("promo")
        response = client.post(
            f"{API}/pages/{page.id}/sections",
            json={"key": "promo", "component": "PromoCard"},
            headers=editor_headers,
        )
        assert response.status_code == 409

    def test_edit_publish_discard(self, client, editor_headers, make_section):
        section = make_section()
        url = f"{API}/sections/{section.id}"

        assert client.post(f"{url}/publish", headers=editor_headers).get_json()["status"] == "published"

        edited = client.put(
            url, json={"draft_content": {"title": "Brunch"}}, headers=editor_headers
        ).get_json()
        assert edited["status"] == "dirty"
        assert edited["draft_content"]["ctaLabel"] == "ORDER NOW"

        assert client.post(f"{url}/discard", headers=editor_headers).get_json()["status"] == "published"
        assert client.get(url, headers=editor_headers).get_json()["draft_content"]["title"] == (
            "Delicious Breakfast Menu"
        )

    def test_draft_content_must_be_an_object(self, client, editor_headers, make_section):
        section = make_section()
        response = client.put(
            f"{API}/sections/{section.id}", json={"draft_content": ["x"]}, headers=editor_headers
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [[1, 2], "text", 7])
    def test_edit_needs_an_object_body(self, client, editor_headers, make_section, body):
        section = make_section()
        response = client.put(f"{API}/sections/{section.id}", json=body, headers=editor_headers)
        assert response.status_code == 400

    def test_create_needs_an_object_body(self, client, editor_headers, page):
        response = client.post(f"{API}/pages/{page.id}/sections", json=[1, 2], headers=editor_headers)
        assert response.status_code == 400

        response = client.post(f"{API}/pages", json=[1, 2], headers=editor_headers)
        assert response.status_code == 400

    def test_failed_draft_save_is_retryable(self, client, editor_headers, make_section, break_commits):
        section = make_section()
        break_commits()

        response = client.put(
            f"{API}/sections/{section.id}",
            json={"draft_content": {"title": "Brunch"}},
            headers=editor_headers,
        )

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"
        assert response.get_json()["error"] == "DraftSaveFailed"
        assert section.draft_content["title"] == "Delicious Breakfast Menu"

    def test_discard_never_published(self, client, editor_headers, make_section):
        section = make_section()
        response = client.post(f"{API}/sections/{section.id}/discard", headers=editor_headers)
        assert response.status_code == 409
        assert response.get_json()["error"] == "IllegalTransition"

    def test_viewer_cannot_publish(self, client, viewer_headers, make_section):
        section = make_section()
        response = client.post(f"{API}/sections/{section.id}/publish", headers=viewer_headers)
        assert response.status_code == 403

    def test_viewer_can_read(self, client, viewer_headers, make_section):
        section = make_section()
        response = client.get(f"{API}/sections/{section.id}", headers=viewer_headers)
        assert response.status_code == 200

    def test_publish_failure_is_retryable(self, client, editor_headers, make_section, break_commits):
        section = make_section()
        break_commits()

        response = client.post(f"{API}/sections/{section.id}/publish", headers=editor_headers)

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"
        assert section.status == "draft"
        assert section.published_content is None

    def test_stale_edit_is_rejected(self, client, editor_headers, make_section):
        section = make_section()
        response = client.put(
            f"{API}/sections/{section.id}",
            json={"draft_content": {"title": "Brunch"}},
            headers={**editor_headers, "If-Unmodified-Since": "Mon, 01 Jan 2001 00:00:00 GMT"},
        )
        assert response.status_code == 409

    def test_reorder(self, client, editor_headers, page, make_section):
        hero = make_section("hero", "HeroSection")
        promo = make_section("promo")
        response = client.post(
            f"{API}/pages/{page.id}/sections/reorder",
            json=[{"id": promo.id, "position": 0}],
            headers=editor_headers,
        )
        assert response.get_json()["order"] == [promo.id, hero.id]

    def test_publish_all(self, client, editor_headers, page, make_section):
        make_section("hero", "HeroSection")
        make_section("promo")
        response = client.post(f"{API}/pages/{page.id}/publish-all", headers=editor_headers)
        assert response.get_json()["status"] == "published"

    def test_other_tenant_section_is_hidden(self, client, make_section, outsider_headers):
        section = make_section()
        response = client.get(f"{API}/sections/{section.id}", headers=outsider_headers)
        assert response.status_code == 404


class TestPreview:
    def _issue(self, client, headers, section):
        return client.post(
            f"{API}/preview/tokens",
            json={"org_id": section.tenant_id, "page_id": section.page_id, "section_id": section.id},
            headers=headers,
        )

    def test_issue_token(self, client, editor_headers, make_section):
        response = self._issue(client, editor_headers, make_section())
        body = response.get_json()
        assert response.status_code == 201
        assert body["token"]
        assert body["expires_at"]

    def test_issue_token_needs_full_scope(self, client, editor_headers, tenant):
        response = client.post(
            f"{API}/preview/tokens", json={"org_id": tenant.id}, headers=editor_headers
        )
        assert response.status_code == 400

    def test_issue_token_needs_an_object_body(self, client, editor_headers):
        response = client.post(f"{API}/preview/tokens", json=[1, 2], headers=editor_headers)
        assert response.status_code == 400

    def test_issue_token_for_unknown_section(self, client, editor_headers, page):
        response = client.post(
            f"{API}/preview/tokens",
            json={"org_id": page.tenant_id, "page_id": page.id, "section_id": "missing"},
            headers=editor_headers,
        )
        assert response.status_code == 404

    def test_renderer_fetches_draft(self, client, editor_headers, tenant, make_section):
        section = make_section(content={"eyebrow": "SPECIAL"})
        token = self._issue(client, editor_headers, section).get_json()["token"]

        response = client.get(
            f"{API}/preview/content",
            query_string={"page": "home", "section": "promo", "token": token},
            headers={"X-Tenant-ID": tenant.id},
        )

        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "no-store"
        assert response.get_json()["content"]["eyebrow"] == "SPECIAL"

    def test_token_for_another_section_is_refused(self, client, editor_headers, tenant, make_section):
        promo = make_section("promo")
        make_section("hero", "HeroSection")
        token = self._issue(client, editor_headers, promo).get_json()["token"]

        response = client.get(
            f"{API}/preview/content",
            query_string={"page": "home", "section": "hero", "token": token},
            headers={"X-Tenant-ID": tenant.id},
        )

        assert response.status_code == 403
        assert response.get_json() == {"error": "Invalid preview token"}

    @pytest.mark.parametrize("token", ["", "made-up"])
    def test_bad_token_is_refused(self, client, tenant, make_section, token):
        make_section()
        response = client.get(
            f"{API}/preview/content",
            query_string={"page": "home", "section": "promo", "token": token},
            headers={"X-Tenant-ID": tenant.id},
        )
        assert response.status_code == 403

    def test_frame_descriptor(self, client, editor_headers, make_section):
        section = make_section()
        body = client.get(f"{API}/sections/{section.id}/preview-frame", headers=editor_headers).get_json()

        assert body["src"].startswith("https://johnnygs.example/?page=home&section=promo&token=")
        assert body["sandbox"] == "allow-same-origin allow-scripts"
        assert body["timeout_seconds"] == 10
        assert body["src"].endswith(body["token"])


class TestPublicSite:
    def test_only_live_content_is_served(self, client, tenant, make_section):
        promo = make_section("promo")
        make_section("hero", "HeroSection")
        _publish(promo)

        response = client.get(f"{API}/site/pages/home", headers={"X-Tenant-ID": tenant.id})
        sections = response.get_json()["sections"]

        assert [s["key"] for s in sections] == ["promo"]
        assert sections[0]["content"]["ctaLabel"] == "ORDER NOW"

    def test_unpublished_page(self, client, tenant, make_section):
        make_section()
        response = client.get(f"{API}/site/pages/home", headers={"X-Tenant-ID": tenant.id})
        assert response.status_code == 404


class TestPreviewFrameBaseUrl:
    def test_bad_base_url_issues_no_token(self, client, editor_headers, page, make_section):
        section = make_section()
        page.base_url = "not-a-url"
        db.session.commit()

        response = client.get(f"{API}/sections/{section.id}/preview-frame", headers=editor_headers)

        assert response.status_code == 422
        assert PreviewToken.query.count() == 0
