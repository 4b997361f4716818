import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from src.git_data.models import Identity, TreeItem

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# GitHub answers 409 for refs of a repository that has no commits yet
REF_MISSING_STATUSES = (404, 409)


class GitDataClient:
    """Async client for the Git Data endpoints of the GitHub REST API.

    Only object creation and ref reads/writes are exposed. Every call is a
    suspension point, so callers can fan out with asyncio.gather.
    """

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    @classmethod
    def from_token(
        cls,
        token: Optional[str] = None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
    ) -> "GitDataClient":
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return cls(httpx.AsyncClient(base_url=base_url, headers=headers, timeout=timeout))

    async def aclose(self):
        await self.http.aclose()

    async def __aenter__(self) -> "GitDataClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    def _repo_path(self, owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    async def _post(self, url: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.http.post(url, json=body)
        response.raise_for_status()
        return response.json() if response.content else {}

    async def get_ref(self, owner: str, repo: str, ref: str) -> Optional[str]:
        """Resolves a ref such as 'heads/main' to its sha, or None if it is missing."""
        url = f"{self._repo_path(owner, repo)}/git/ref/{quote(ref, safe='/')}"
        response = await self.http.get(url)
        if response.status_code in REF_MISSING_STATUSES:
            logger.debug(f"Ref {ref} not found in {owner}/{repo}")
            return None
        response.raise_for_status()
        return response.json()["object"]["sha"]

    async def get_default_branch(self, owner: str, repo: str) -> str:
        response = await self.http.get(self._repo_path(owner, repo))
        response.raise_for_status()
        return response.json()["default_branch"]

    async def head_exists(self, owner: str, repo: str, path: str, ref: str) -> bool:
        """Checks whether a path exists at a given commit. Any non-2xx answer counts as absent."""
        url = f"{self._repo_path(owner, repo)}/contents/{quote(path, safe='/')}"
        response = await self.http.head(url, params={"ref": ref})
        return response.is_success

    async def create_blob(self, owner: str, repo: str, content: str) -> str:
        data = await self._post(
            f"{self._repo_path(owner, repo)}/git/blobs",
            {"content": content, "encoding": "base64"},
        )
        return data["sha"]

    async def create_tree(
        self, owner: str, repo: str, items: List[TreeItem], base_tree: str
    ) -> Dict[str, Any]:
        return await self._post(
            f"{self._repo_path(owner, repo)}/git/trees",
            {"tree": [item.serialize() for item in items], "base_tree": base_tree},
        )

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree: str,
        parents: List[str],
        committer: Optional[Identity] = None,
        author: Optional[Identity] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": message, "tree": tree, "parents": parents}
        if committer:
            body["committer"] = committer.serialize()
        if author:
            body["author"] = author.serialize()
        return await self._post(f"{self._repo_path(owner, repo)}/git/commits", body)

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> Dict[str, Any]:
        return await self._post(
            f"{self._repo_path(owner, repo)}/git/refs", {"ref": ref, "sha": sha}
        )

    async def update_ref(
        self, owner: str, repo: str, ref: str, sha: str, force: bool = True
    ) -> Dict[str, Any]:
        url = f"{self._repo_path(owner, repo)}/git/refs/{quote(ref, safe='/')}"
        response = await self.http.patch(url, json={"sha": sha, "force": force})
        response.raise_for_status()
        return response.json() if response.content else {}
