import logging
from dataclasses import dataclass, field
from typing import List, Optional

from src.git_data.client import GitDataClient
from src.git_data.models import CommitRecord
from src.publish.builder import build_commit
from src.publish.changes import build_tree_items
from src.publish.models import ChangeSet
from src.publish.refs import publish_ref, resolve_base

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    branch: str
    head: Optional[str] = None
    created_branch: bool = False
    commits: List[CommitRecord] = field(default_factory=list)


async def publish_changes(client: GitDataClient, changeset: ChangeSet) -> PublishResult:
    """Publishes every change of the changeset as one commit each and moves the branch.

    Commits are chained in request order: each one's parent is the previous
    commit, the first one's parent is the resolved base. The branch ref is only
    written after all commits exist. Objects created before a failure are left
    unreferenced.
    """
    changeset.validate()
    owner, repo = changeset.owner, changeset.repo
    batch_size = changeset.effective_batch_size

    base, branch_exists = await resolve_base(client, changeset)

    commits: List[CommitRecord] = []
    for index, change in enumerate(changeset.changes):
        items = await build_tree_items(
            client, owner, repo, change, base, batch_size, entries=change.normalized_files()
        )
        if not items:
            logger.info(f"Change {index} ({change.message!r}) has nothing to commit, skipping")
            continue

        commit = await build_commit(
            client,
            owner,
            repo,
            items,
            base,
            change.message,
            committer=changeset.committer,
            author=changeset.author,
        )
        commits.append(commit)
        base = commit.sha

    await publish_ref(client, owner, repo, changeset.branch, base, branch_exists)

    return PublishResult(
        branch=changeset.branch,
        head=base,
        created_branch=not branch_exists,
        commits=commits,
    )
