from __future__ import annotations


class CollisionFinderError(Exception):
    """Fatal condition: logged once by the CLI, then the process exits."""

    exit_code = 1


class MissingDependency(CollisionFinderError):
    pass


class MissingRequiredOption(CollisionFinderError):
    pass


class MutuallyExclusiveArguments(CollisionFinderError):
    pass


class UnsupportedDirectoryType(CollisionFinderError):
    pass


class DecryptionFailure(CollisionFinderError):
    pass


class NoCandidateServers(CollisionFinderError):
    pass


class NoTLSCapableServers(NoCandidateServers):
    pass


class AllCandidatesUnreachable(CollisionFinderError):
    pass


class DirectoryBindFailure(CollisionFinderError):
    pass


class DirectorySearchFailure(CollisionFinderError):
    pass


class DirectoryDeleteBadSyntax(CollisionFinderError):
    pass


class DirectoryDeleteFailure(CollisionFinderError):
    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
