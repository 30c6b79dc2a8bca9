"""GitManager - local branch handling for started tickets."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from shipyard.git_manager.exceptions import BranchError
from shipyard.tickets import short_id

logger = logging.getLogger(__name__)

BRANCH_PREFIX = "feature/shipyard-"


def branch_name_for(ticket_id: str) -> str:
    """Feature branch name for a ticket, e.g. ``feature/shipyard-1a2b3c4d``."""
    return f"{BRANCH_PREFIX}{short_id(ticket_id)}"


class GitManager:
    """Creates or switches to ticket branches in a local clone."""

    def __init__(self, repo_path: str | Path = ".") -> None:
        """Initialize Git Manager.

        Args:
            repo_path: Path to local repository clone
        """
        self.repo_path = Path(repo_path)

    def _run_git(self, *args: str) -> str:
        """Run a git command in the repo directory.

        Raises:
            subprocess.CalledProcessError: If command fails
        """
        result = subprocess.run(
            ["git", *args],
            cwd=self.repo_path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def checkout_branch(self, branch_name: str) -> bool:
        """Create ``branch_name`` from HEAD, or switch to it if it already exists.

        Returns:
            True if the branch was created, False if it already existed.

        Raises:
            BranchError: If the branch can be neither created nor checked out.
        """
        try:
            self._run_git("checkout", "-b", branch_name)
        except subprocess.CalledProcessError:
            logger.debug("Branch %s not created; trying to switch to it", branch_name)
        else:
            logger.info("Created branch %s", branch_name)
            return True

        try:
            self._run_git("checkout", branch_name)
        except subprocess.CalledProcessError as e:
            logger.error("Failed to create or switch to %s: %s", branch_name, e.stderr)
            raise BranchError(
                f"Could not create or switch to branch '{branch_name}': {e.stderr}"
            ) from e
        logger.info("Switched to existing branch %s", branch_name)
        return False
