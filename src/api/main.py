from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import httpx
import os

from src.api.schemas import PublishRequest, PublishResponse
from src.git_data.client import DEFAULT_API_URL, GitDataClient
from src.publish.errors import BaseNotFound, BranchNotFound, DeletionTargetMissing, PublishError
from src.publish.service import publish_changes

import logging

# Configure Logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Git Data Publisher API")

# Allow CORS
# In production, set ALLOWED_ORIGINS to a comma-separated list of domains
allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "*")
allowed_origins = [origin.strip() for origin in allowed_origins_env.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_url = os.getenv("GITHUB_API_URL", DEFAULT_API_URL)
client = GitDataClient.from_token(
    token=os.getenv("GITHUB_TOKEN"),
    base_url=api_url,
    timeout=float(os.getenv("GITHUB_TIMEOUT", "30")),
)

def get_client() -> GitDataClient:
    return client

@app.on_event("shutdown")
async def shutdown_event():
    await client.aclose()

@app.post("/api/repos/{owner}/{repo}/changes", response_model=PublishResponse)
async def create_changes(
    owner: str, repo: str, req: PublishRequest, git: GitDataClient = Depends(get_client)
):
    """Publish one commit per change to the branch, then move the branch ref."""
    changeset = req.to_changeset(owner, repo)
    try:
        result = await publish_changes(git, changeset)
    except (BranchNotFound, BaseNotFound, DeletionTargetMissing) as e:
        logger.warning(f"Publish to {owner}/{repo}@{req.branch} rejected: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    except PublishError as e:
        logger.warning(f"Publish to {owner}/{repo}@{req.branch} rejected: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except httpx.HTTPStatusError as e:
        logger.error(f"Git Data API call failed: {e}")
        raise HTTPException(
            status_code=502,
            detail=f"Upstream error {e.response.status_code} for {e.request.url}",
        )
    return PublishResponse.from_result(result)

@app.get("/health")
def health_check():
    return {"status": "ok", "api": api_url}
