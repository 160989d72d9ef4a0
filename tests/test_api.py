"""
HTTP tests for the shortlink API.
"""
import asyncio
import time

from fastapi.testclient import TestClient

from shortlink_app.models.link import Link


def code_of(short_url: str) -> str:
    return short_url.rsplit("/", 1)[1]


class TestShortener:
    """POST /v1/shortener and its front-end alias"""

    def test_create_short_url(self, client: TestClient):
        response = client.post("/v1/shortener", json={"url": "https://example.com"})
        assert response.status_code == 200

        short_url = response.json()["short_url"]
        assert short_url.startswith("http://testserver/r/")
        assert len(code_of(short_url)) == 6
        assert code_of(short_url).isalnum()

    def test_frontend_alias(self, client: TestClient):
        response = client.post("/api/shorten", json={"url": "https://example.com"})
        assert response.status_code == 200
        assert "/r/" in response.json()["short_url"]

    def test_empty_url(self, client: TestClient, link_store):
        response = client.post("/v1/shortener", json={"url": ""})

        assert response.status_code == 400
        assert response.text == "URL is required"
        assert link_store.list_all() == []

    def test_missing_url_field(self, client: TestClient):
        response = client.post("/v1/shortener", json={"link": "https://example.com"})
        assert response.status_code == 400
        assert response.text == "Invalid request body"

    def test_malformed_json(self, client: TestClient):
        response = client.post(
            "/v1/shortener",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_wrong_method(self, client: TestClient):
        assert client.get("/v1/shortener").status_code == 405
        assert client.put("/api/shorten", json={"url": "https://example.com"}).status_code == 405

    def test_configured_base_url(self, client: TestClient, app_context):
        app_context.settings.base_url = "https://sho.rt"

        response = client.post("/v1/shortener", json={"url": "https://example.com"})

        assert response.json()["short_url"].startswith("https://sho.rt/r/")


class TestRedirect:
    """GET /r/{code}"""

    def test_register_redirect_and_count(self, client: TestClient, link_store, wait_until):
        """Register, follow the short link, see the click land"""
        created = client.post("/v1/shortener", json={"url": "https://example.com"})
        code = code_of(created.json()["short_url"])

        response = client.get(f"/r/{code}", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "https://example.com"
        assert wait_until(lambda: link_store.get(code).clicks == 1)

    def test_second_redirect_served_from_cache(self, client: TestClient, cache, wait_until):
        created = client.post("/v1/shortener", json={"url": "https://example.com/page"})
        code = code_of(created.json()["short_url"])

        client.get(f"/r/{code}", follow_redirects=False)

        assert wait_until(lambda: asyncio.run(cache.get(f"url:{code}")) is not None)
        response = client.get(f"/r/{code}", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "https://example.com/page"

    def test_slow_click_does_not_hold_up_other_requests(
        self, client: TestClient, link_store, monkeypatch, wait_until
    ):
        created = client.post("/v1/shortener", json={"url": "https://example.com"})
        code = code_of(created.json()["short_url"])
        increment_clicks = link_store.increment_clicks

        def slow_increment(redirect_code):
            time.sleep(0.5)
            increment_clicks(redirect_code)

        monkeypatch.setattr(link_store, "increment_clicks", slow_increment)

        assert client.get(f"/r/{code}", follow_redirects=False).status_code == 307

        started = time.monotonic()
        response = client.get("/health")
        elapsed = time.monotonic() - started

        assert response.status_code == 200
        assert elapsed < 0.25
        assert wait_until(lambda: link_store.get(code).clicks == 1)

    def test_unknown_code(self, client: TestClient):
        response = client.get("/r/unknownCode", follow_redirects=False)

        assert response.status_code == 404
        assert response.text == "Redirect code not found"

    def test_empty_code(self, client: TestClient):
        response = client.get("/r/", follow_redirects=False)
        assert response.status_code == 400

    def test_store_failure(self, client: TestClient, link_store):
        Link.__table__.drop(bind=link_store.engine)

        response = client.get("/r/abc123", follow_redirects=False)

        assert response.status_code == 500
        assert response.text == "Internal server error"


class TestLinks:
    """GET /v1/links"""

    def test_lists_newest_first(self, client: TestClient, wait_until, link_store):
        first = code_of(client.post("/v1/shortener", json={"url": "https://one.example"}).json()["short_url"])
        second = code_of(client.post("/v1/shortener", json={"url": "https://two.example"}).json()["short_url"])
        client.get(f"/r/{first}", follow_redirects=False)
        assert wait_until(lambda: link_store.get(first).clicks == 1)

        response = client.get("/v1/links")
        assert response.status_code == 200

        links = response.json()["links"]
        assert [link["redirect_code"] for link in links] == [second, first]
        assert links[1] == {
            "redirect_code": first,
            "destiny_url": "https://one.example",
            "short_url": f"http://testserver/r/{first}",
            "clicks": 1,
            "created_at": links[1]["created_at"],
        }

    def test_empty_listing(self, client: TestClient):
        response = client.get("/v1/links")
        assert response.json() == {"links": []}


class TestServiceEndpoints:
    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client: TestClient):
        assert client.get("/").json()["docs"] == "/docs"
