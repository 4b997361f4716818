import logging
from typing import Dict, List, Optional, Tuple

from src.git_data.client import GitDataClient
from src.git_data.encoding import to_base64
from src.git_data.models import TreeItem
from src.publish.batch import run_in_batches
from src.publish.errors import DeletionTargetMissing
from src.publish.models import Change, FileEntry

logger = logging.getLogger(__name__)


async def resolve_deletions(
    client: GitDataClient,
    owner: str,
    repo: str,
    paths: List[str],
    base: str,
    batch_size: int,
    ignore_failures: bool = False,
) -> List[TreeItem]:
    """Turns paths to delete into null-sha tree items.

    Paths missing from `base` are dropped when failures are ignored. Otherwise
    the batch in flight is allowed to finish and the first missing path, in
    request order, is reported; later batches are not started.
    """

    async def lookup(path: str) -> Tuple[str, bool]:
        exists = await client.head_exists(owner, repo, path, base)
        logger.debug(f"Lookup of {path} at {base}: exists={exists}")
        return path, exists

    def check(batch: List[str], results: List[Tuple[str, bool]]):
        if ignore_failures:
            return
        for path, exists in results:
            if not exists:
                raise DeletionTargetMissing(path)

    results = await run_in_batches(paths, batch_size, lookup, check)

    items = []
    for path, exists in results:
        if exists:
            items.append(TreeItem.deletion(path))
        else:
            logger.info(f"Skipping deletion of missing file {path}")
    return items


async def resolve_file(
    client: GitDataClient, owner: str, repo: str, path: str, entry: FileEntry
) -> TreeItem:
    if entry.is_submodule:
        # A submodule entry points at a commit of another repository; nothing to upload
        sha = entry.contents
    else:
        sha = await client.create_blob(owner, repo, to_base64(entry.contents))
    return TreeItem(path=path, sha=sha, mode=entry.mode, type=entry.type)


async def resolve_files(
    client: GitDataClient,
    owner: str,
    repo: str,
    files: Dict[str, FileEntry],
    batch_size: int,
) -> List[TreeItem]:
    """Creates blobs for every file entry and returns their tree items."""
    return await run_in_batches(
        list(files.items()),
        batch_size,
        lambda pair: resolve_file(client, owner, repo, pair[0], pair[1]),
    )


async def build_tree_items(
    client: GitDataClient,
    owner: str,
    repo: str,
    change: Change,
    base: str,
    batch_size: int,
    entries: Optional[Dict[str, FileEntry]] = None,
) -> List[TreeItem]:
    """Returns deletions first, then creations, so a deleted and re-added path ends up re-added."""
    if entries is None:
        entries = change.normalized_files()

    items: List[TreeItem] = []
    if change.files_to_delete:
        items.extend(
            await resolve_deletions(
                client,
                owner,
                repo,
                change.files_to_delete,
                base,
                batch_size,
                ignore_failures=change.ignore_deletion_failures,
            )
        )
    if entries:
        items.extend(await resolve_files(client, owner, repo, entries, batch_size))
    return items
