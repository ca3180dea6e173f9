"""Tests for DryRunGitHub."""

from pathlib import Path

import pytest

from git_pr.gateway.github.dry_run import DryRunGitHub
from git_pr.gateway.github.fake import FakeGitHub
from git_pr.gateway.github.types import RemotePullRequest

REPO = Path("/repo")


def test_create_pr_prints_command(capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeGitHub()

    result = DryRunGitHub(fake).create_pr(
        REPO, base="main", title="[T-1]: Add login", body="body", reviewers=["alice"]
    )

    assert result == "Dry run - no PR created"
    assert fake.created_prs == []
    assert capsys.readouterr().err.strip() == (
        "[DRY RUN] Would run: gh pr create -B main -t '[T-1]: Add login' "
        "-a @me -b body -r alice"
    )


def test_update_pr_body_prints_command(capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeGitHub()

    result = DryRunGitHub(fake).update_pr_body(REPO, 3, "owner/repo", "new body")

    assert result == "Dry run - no PR updated"
    assert fake.updated_bodies == []
    assert "gh pr edit 3 --repo owner/repo -b 'new body'" in capsys.readouterr().err


def test_queries_pass_through() -> None:
    pr = RemotePullRequest("PR_1", "[T-1]: a", 1, "/owner/repo/pull/1", "")
    fake = FakeGitHub(authenticated_user="octocat", assignable_users=["bob"], open_prs=[pr])
    github = DryRunGitHub(fake)

    assert github.get_authenticated_user(REPO) == "octocat"
    assert github.list_assignable_users(REPO) == ["bob"]
    assert github.list_my_open_prs(REPO, "octocat") == [pr]
    assert github.get_pr(REPO, 1) == pr
