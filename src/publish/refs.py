import logging
from typing import Tuple

from src.git_data.client import GitDataClient
from src.publish.errors import BaseNotFound, BranchNotFound
from src.publish.models import ChangeSet

logger = logging.getLogger(__name__)


def head_ref(branch: str) -> str:
    return f"heads/{branch}"


async def resolve_base(client: GitDataClient, changeset: ChangeSet) -> Tuple[str, bool]:
    """Finds the commit new work builds on.

    Returns (base sha, whether the target branch already exists). The target
    branch tip is used unless it is missing or a fork from the base branch was
    requested; then the base branch (or the repository default) is used.
    """
    owner, repo, branch = changeset.owner, changeset.repo, changeset.branch

    branch_sha = await client.get_ref(owner, repo, head_ref(branch))
    branch_exists = branch_sha is not None

    if branch_exists and not changeset.fork_from_base_branch:
        logger.info(f"Building on existing branch {branch} at {branch_sha}")
        return branch_sha, True

    if not branch_exists and not changeset.create_branch:
        raise BranchNotFound(branch)

    base = changeset.base
    if not base:
        base = await client.get_default_branch(owner, repo)
        logger.info(f"No base given, using default branch {base} of {owner}/{repo}")

    base_sha = await client.get_ref(owner, repo, head_ref(base))
    if base_sha is None:
        raise BaseNotFound(base)

    logger.info(f"Building {branch} from base {base} at {base_sha}")
    return base_sha, branch_exists


async def publish_ref(
    client: GitDataClient, owner: str, repo: str, branch: str, sha: str, branch_exists: bool
):
    """Points the branch at sha, creating it or force-moving an existing one."""
    if branch_exists:
        logger.info(f"Force-updating {branch} to {sha}")
        await client.update_ref(owner, repo, head_ref(branch), sha, force=True)
    else:
        logger.info(f"Creating branch {branch} at {sha}")
        await client.create_ref(owner, repo, f"refs/{head_ref(branch)}", sha)
