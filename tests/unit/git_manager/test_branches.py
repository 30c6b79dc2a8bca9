"""Unit tests for GitManager."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from shipyard.git_manager import BranchError, GitManager, branch_name_for


@pytest.mark.unit
def test_branch_name_for():
    """Branch names use the dash-free short id."""
    assert branch_name_for("1a2b3c4d-5e6f-7081") == "feature/shipyard-1a2b3c4d"


@pytest.mark.unit
class TestCheckoutBranch:
    """Tests for checkout_branch."""

    @pytest.fixture
    def manager(self, tmp_path) -> GitManager:
        return GitManager(tmp_path)

    def test_creates_new_branch(self, manager: GitManager) -> None:
        with patch.object(manager, "_run_git", return_value="") as run:
            assert manager.checkout_branch("feature/x") is True

        run.assert_called_once_with("checkout", "-b", "feature/x")

    def test_switches_to_existing_branch(self, manager: GitManager) -> None:
        error = subprocess.CalledProcessError(128, ["git"], stderr="already exists")
        run = MagicMock(side_effect=[error, ""])

        with patch.object(manager, "_run_git", run):
            assert manager.checkout_branch("feature/x") is False

        assert run.call_args_list[1].args == ("checkout", "feature/x")

    def test_raises_when_both_fail(self, manager: GitManager) -> None:
        error = subprocess.CalledProcessError(128, ["git"], stderr="not a git repository")

        with patch.object(manager, "_run_git", side_effect=error):
            with pytest.raises(BranchError, match="not a git repository"):
                manager.checkout_branch("feature/x")
