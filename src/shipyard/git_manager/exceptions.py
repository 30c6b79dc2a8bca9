"""Custom exceptions for Git Manager."""


class GitManagerError(Exception):
    """Base exception for Git Manager errors."""


class BranchError(GitManagerError):
    """Error creating or switching branches."""
