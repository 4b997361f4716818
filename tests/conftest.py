import httpx
import pytest
import pytest_asyncio

from fake_github import FakeGitHub
from src.git_data.client import GitDataClient


@pytest.fixture
def github():
    return FakeGitHub()


@pytest_asyncio.fixture
async def client(github):
    transport = httpx.MockTransport(github.handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://api.github.com") as http:
        yield GitDataClient(http)
