from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field

from src.git_data.models import CommitRecord, Identity
from src.publish.models import Change, ChangeSet, FileEntry
from src.publish.service import PublishResult

FileMode = Literal["100644", "100755", "040000", "160000", "120000"]
ObjectType = Literal["blob", "tree", "commit"]

class IdentitySchema(BaseModel):
    name: str
    email: str
    date: Optional[str] = None

    def to_identity(self) -> Identity:
        return Identity(name=self.name, email=self.email, date=self.date)

class FileEntrySchema(BaseModel):
    contents: Optional[str] = None
    mode: FileMode = "100644"
    type: ObjectType = "blob"

class ChangeSchema(BaseModel):
    message: str = ""
    files: Dict[str, Optional[Union[str, FileEntrySchema]]] = Field(default_factory=dict)
    files_to_delete: List[str] = Field(default_factory=list)
    ignore_deletion_failures: bool = False

    def to_change(self) -> Change:
        files = {}
        for path, value in self.files.items():
            if isinstance(value, FileEntrySchema):
                value = FileEntry(contents=value.contents, mode=value.mode, type=value.type)
            files[path] = value
        return Change(
            message=self.message,
            files=files,
            files_to_delete=list(self.files_to_delete),
            ignore_deletion_failures=self.ignore_deletion_failures,
        )

class PublishRequest(BaseModel):
    branch: str
    changes: List[ChangeSchema]
    base: Optional[str] = None
    create_branch: bool = False
    fork_from_base_branch: bool = False
    committer: Optional[IdentitySchema] = None
    author: Optional[IdentitySchema] = None
    batch_size: Optional[int] = None

    def to_changeset(self, owner: str, repo: str) -> ChangeSet:
        return ChangeSet(
            owner=owner,
            repo=repo,
            branch=self.branch,
            changes=[change.to_change() for change in self.changes],
            base=self.base,
            create_branch=self.create_branch,
            fork_from_base_branch=self.fork_from_base_branch,
            committer=self.committer.to_identity() if self.committer else None,
            author=self.author.to_identity() if self.author else None,
            batch_size=self.batch_size,
        )

class CommitResponse(BaseModel):
    sha: str
    tree_sha: str
    parents: List[str]
    message: str
    html_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: CommitRecord) -> "CommitResponse":
        return cls(
            sha=record.sha,
            tree_sha=record.tree_sha,
            parents=record.parents,
            message=record.message,
            html_url=record.html_url,
        )

class PublishResponse(BaseModel):
    branch: str
    head: Optional[str] = None
    created_branch: bool
    commits: List[CommitResponse]

    @classmethod
    def from_result(cls, result: PublishResult) -> "PublishResponse":
        return cls(
            branch=result.branch,
            head=result.head,
            created_branch=result.created_branch,
            commits=[CommitResponse.from_record(c) for c in result.commits],
        )
