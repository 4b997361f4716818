from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

MODE_FILE = "100644"
MODE_EXECUTABLE = "100755"
MODE_DIRECTORY = "040000"
MODE_SUBMODULE = "160000"
MODE_SYMLINK = "120000"

FILE_MODES = (MODE_FILE, MODE_EXECUTABLE, MODE_DIRECTORY, MODE_SUBMODULE, MODE_SYMLINK)
OBJECT_TYPES = ("blob", "tree", "commit")


@dataclass
class TreeItem:
    path: str
    sha: Optional[str]
    mode: str = MODE_FILE
    type: str = "blob"

    @property
    def is_deletion(self) -> bool:
        return self.sha is None

    @classmethod
    def deletion(cls, path: str) -> "TreeItem":
        # The API removes a path when its entry carries a null sha
        return cls(path=path, sha=None, mode=MODE_FILE, type="commit")

    def serialize(self) -> Dict[str, Any]:
        return {"path": self.path, "sha": self.sha, "mode": self.mode, "type": self.type}


@dataclass
class Identity:
    name: str
    email: str
    date: Optional[str] = None

    def serialize(self) -> Dict[str, str]:
        data = {"name": self.name, "email": self.email}
        if self.date:
            data["date"] = self.date
        return data


@dataclass
class CommitRecord:
    sha: str
    tree_sha: str
    parents: List[str]
    message: str
    html_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def deserialize(cls, data: Dict[str, Any]) -> "CommitRecord":
        """Build a record from a create-commit response payload."""
        tree = data.get("tree") or {}
        parents = [p["sha"] if isinstance(p, dict) else p for p in data.get("parents", [])]
        return cls(
            sha=data["sha"],
            tree_sha=tree.get("sha", "") if isinstance(tree, dict) else tree,
            parents=parents,
            message=data.get("message", ""),
            html_url=data.get("html_url"),
            raw=data,
        )
