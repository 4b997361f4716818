class PublishError(Exception):
    """Base class for requests that cannot be published as given."""


class MissingRequiredParameter(PublishError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' is a required parameter")


class InvalidBatchSize(PublishError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"batchSize must be a positive integer, got {value!r}")


class BranchNotFound(PublishError):
    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"The branch '{branch}' doesn't exist and createBranch is 'false'")


class BaseNotFound(PublishError):
    def __init__(self, base: str):
        self.base = base
        super().__init__(f"The branch '{base}' doesn't exist")


class MissingCommitMessage(PublishError):
    def __init__(self):
        super().__init__("changes[].message is a required parameter")


class MissingChangesForCommit(PublishError):
    def __init__(self):
        super().__init__("either changes[].files or changes[].filesToDelete are required")


class MissingFileContents(PublishError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No file contents provided for {path}")


class InvalidFileEntry(PublishError):
    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Invalid file entry for {path}: {reason}")


class DeletionTargetMissing(PublishError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"The file {path} could not be found in the repo")
