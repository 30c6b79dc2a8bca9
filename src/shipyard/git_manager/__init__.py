"""Git Manager - local git branches for tickets being worked on."""

from shipyard.git_manager.exceptions import BranchError, GitManagerError
from shipyard.git_manager.manager import BRANCH_PREFIX, GitManager, branch_name_for

__all__ = [
    "BRANCH_PREFIX",
    "BranchError",
    "GitManager",
    "GitManagerError",
    "branch_name_for",
]
