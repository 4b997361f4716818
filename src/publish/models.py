from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from src.git_data.models import FILE_MODES, MODE_FILE, OBJECT_TYPES, Identity
from src.publish.errors import (
    InvalidBatchSize,
    InvalidFileEntry,
    MissingChangesForCommit,
    MissingCommitMessage,
    MissingFileContents,
    MissingRequiredParameter,
)


@dataclass
class FileEntry:
    contents: Union[str, bytes, None]
    mode: str = MODE_FILE
    type: str = "blob"

    @classmethod
    def from_value(cls, path: str, value: "FileValue") -> "FileEntry":
        """Normalizes raw contents or a structured entry into one checked FileEntry."""
        if isinstance(value, FileEntry):
            entry = cls(contents=value.contents, mode=value.mode, type=value.type)
        elif isinstance(value, Mapping):
            entry = cls(
                contents=value.get("contents"),
                mode=value.get("mode") or MODE_FILE,
                type=value.get("type") or "blob",
            )
        elif value is None or isinstance(value, (str, bytes)):
            entry = cls(contents=value)
        else:
            raise InvalidFileEntry(path, f"unsupported value of type {type(value).__name__}")

        if not entry.contents:
            raise MissingFileContents(path)
        if entry.mode not in FILE_MODES:
            raise InvalidFileEntry(path, f"unknown mode {entry.mode!r}")
        if entry.type not in OBJECT_TYPES:
            raise InvalidFileEntry(path, f"unknown type {entry.type!r}")
        if entry.is_submodule and isinstance(entry.contents, bytes):
            # Submodule pointers are commit shas sent verbatim in the tree
            try:
                entry.contents = entry.contents.decode("utf-8")
            except UnicodeDecodeError:
                raise InvalidFileEntry(path, "submodule commit sha is not valid UTF-8 text")
        return entry

    @property
    def is_submodule(self) -> bool:
        return self.type == "commit"


FileValue = Union[str, bytes, FileEntry, Mapping[str, Any], None]


@dataclass
class Change:
    message: str
    files: Optional[Dict[str, FileValue]] = field(default_factory=dict)
    files_to_delete: Optional[List[str]] = field(default_factory=list)
    ignore_deletion_failures: bool = False
    entries: Optional[Dict[str, FileEntry]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.files = self.files or {}
        self.files_to_delete = self.files_to_delete or []

    def validate(self):
        if not self.message:
            raise MissingCommitMessage()
        if not self.files and not self.files_to_delete:
            raise MissingChangesForCommit()
        self.entries = None
        self.normalized_files()

    def normalized_files(self) -> Dict[str, FileEntry]:
        """Returns the entries resolved by validate(), resolving them now if it hasn't run."""
        if self.entries is None:
            self.entries = {path: FileEntry.from_value(path, value) for path, value in self.files.items()}
        return self.entries


@dataclass
class ChangeSet:
    owner: str
    repo: str
    branch: str
    changes: List[Change]
    base: Optional[str] = None
    create_branch: bool = False
    fork_from_base_branch: bool = False
    committer: Optional[Identity] = None
    author: Optional[Identity] = None
    batch_size: Optional[int] = None

    @property
    def effective_batch_size(self) -> int:
        return 1 if self.batch_size is None else self.batch_size

    def validate(self):
        """Runs every check that needs no remote call; raises the first violation."""
        for name in ("owner", "repo", "branch"):
            if not getattr(self, name):
                raise MissingRequiredParameter(name)
        if not self.changes:
            raise MissingRequiredParameter("changes")

        size = self.batch_size
        if size is not None and (isinstance(size, bool) or not isinstance(size, int) or size < 1):
            raise InvalidBatchSize(size)

        for change in self.changes:
            change.validate()
