import logging
from typing import List, Optional

from src.git_data.client import GitDataClient
from src.git_data.models import CommitRecord, Identity, TreeItem

logger = logging.getLogger(__name__)


async def build_commit(
    client: GitDataClient,
    owner: str,
    repo: str,
    items: List[TreeItem],
    base: str,
    message: str,
    committer: Optional[Identity] = None,
    author: Optional[Identity] = None,
) -> CommitRecord:
    """Creates a tree on top of `base` and a commit of that tree whose only parent is `base`."""
    tree = await client.create_tree(owner, repo, items, base)
    data = await client.create_commit(
        owner,
        repo,
        message,
        tree["sha"],
        [base],
        committer=committer,
        author=author,
    )
    commit = CommitRecord.deserialize(data)
    if not commit.tree_sha:
        commit.tree_sha = tree["sha"]
    if not commit.parents:
        commit.parents = [base]
    if not commit.message:
        commit.message = message
    logger.info(f"Created commit {commit.sha} (tree {tree['sha']}, {len(items)} entries)")
    return commit
