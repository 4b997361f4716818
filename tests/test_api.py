import pytest
from src.api.main import app, get_client
from httpx import ASGITransport, AsyncClient

import pytest_asyncio
from fake_github import OWNER, REPO

CHANGES_URL = f"/api/repos/{OWNER}/{REPO}/changes"

# Fixture for async client
@pytest_asyncio.fixture
async def api(client):
    # Route the app's Git Data calls to the in-memory fake
    app.dependency_overrides[get_client] = lambda: client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.mark.asyncio
async def test_health(api):
    response = await api.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

@pytest.mark.asyncio
async def test_publish_changes(api, github):
    github.refs["heads/main"] = "sha-main"
    response = await api.post(CHANGES_URL, json={
        "branch": "feature",
        "base": "main",
        "create_branch": True,
        "author": {"name": "Me", "email": "me@example.com"},
        "changes": [
            {"message": "Add files", "files": {"a.md": "hello", "run.sh": {"contents": "echo", "mode": "100755"}}},
            {"message": "Remove a", "files_to_delete": ["b.md"], "ignore_deletion_failures": True},
        ],
    })
    assert response.status_code == 200
    data = response.json()
    assert data["branch"] == "feature"
    assert data["created_branch"] is True
    assert data["head"] == "commit-1"
    assert [c["sha"] for c in data["commits"]] == ["commit-1"]
    assert data["commits"][0]["parents"] == ["sha-main"]
    assert github.commits[0]["author"] == {"name": "Me", "email": "me@example.com"}
    assert github.refs["heads/feature"] == "commit-1"

@pytest.mark.asyncio
async def test_publish_unknown_branch(api, github):
    response = await api.post(CHANGES_URL, json={
        "branch": "feature",
        "changes": [{"message": "msg", "files": {"a.md": "hello"}}],
    })
    assert response.status_code == 404
    assert response.json()["detail"] == "The branch 'feature' doesn't exist and createBranch is 'false'"

@pytest.mark.asyncio
async def test_publish_missing_contents(api, github):
    github.refs["heads/feature"] = "sha-feature"
    response = await api.post(CHANGES_URL, json={
        "branch": "feature",
        "changes": [{"message": "msg", "files": {"a.md": None}}],
    })
    assert response.status_code == 422
    assert response.json()["detail"] == "No file contents provided for a.md"
    assert github.calls == []

@pytest.mark.asyncio
async def test_publish_empty_changes(api, github):
    response = await api.post(CHANGES_URL, json={"branch": "feature", "changes": []})
    assert response.status_code == 422
    assert response.json()["detail"] == "'changes' is a required parameter"

@pytest.mark.asyncio
async def test_publish_invalid_mode_is_rejected_by_schema(api, github):
    response = await api.post(CHANGES_URL, json={
        "branch": "feature",
        "changes": [{"message": "msg", "files": {"a.md": {"contents": "x", "mode": "777"}}}],
    })
    assert response.status_code == 422
    assert github.calls == []

@pytest.mark.asyncio
async def test_publish_upstream_failure(api, github):
    github.refs["heads/feature"] = "sha-feature"
    github.fail["/git/trees"] = 500
    response = await api.post(CHANGES_URL, json={
        "branch": "feature",
        "changes": [{"message": "msg", "files": {"a.md": "hello"}}],
    })
    assert response.status_code == 502
