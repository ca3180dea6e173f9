"""Tests for the git-pr workflow using fake gateways."""

from pathlib import Path

import pytest

from git_pr.cli.config import GitPrConfig, TemplateConfig
from git_pr.core.errors import (
    GitHubCliError,
    MissingTagError,
    NoBaseBranchError,
    NoCommitsError,
    UserCancelledError,
)
from git_pr.core.lineage import BranchInfo, resolve_branch_lineage
from git_pr.core.tags import TagHistory
from git_pr.core.workflow import (
    UpdateOutcome,
    build_draft_from_branch,
    run_workflow,
    select_base_branch,
    update_related_prs,
)
from git_pr.gateway.git.fake import FakeGit
from git_pr.gateway.github.dry_run import DryRunGitHub
from git_pr.gateway.github.fake import FakeGitHub
from git_pr.gateway.github.types import RemotePullRequest
from git_pr.gateway.prompt.fake import FakePrompter
from tests.fakes.context import create_test_config, create_test_context
from tests.fakes.history import linear

EMPTY_BLOCK = "<!-- RELATED_PR -->\n<!-- /RELATED_PR -->"


def _login_branch(messages: list[str] | None = None, **kwargs: object) -> FakeGit:
    """main = m1; feature/login = m1 <- l1 <- l2."""
    if messages is None:
        messages = ["[TRACK-7]: Add login form", "Polish login"]
    options = {
        "commits": [*linear("m", ["init"]), *linear("l", messages, parent="m1")],
        "local_branches": {"main": "m1", "feature/login": f"l{len(messages)}"},
        "current_branch": "feature/login",
    }
    options.update(kwargs)
    return FakeGit(**options)  # type: ignore[arg-type]


def _pr(number: int, title: str, body: str = f"intro\n{EMPTY_BLOCK}\n") -> RemotePullRequest:
    return RemotePullRequest(
        id=f"PR_{number}",
        title=title,
        number=number,
        resource_path=f"/owner/repo/pull/{number}",
        body=body,
    )


def _tracked_config(config_dir: Path) -> GitPrConfig:
    return create_test_config(
        config_dir, template=TemplateConfig(tracking_url="https://jira.example.com/browse/")
    )


class TestRunWorkflow:
    def test_tagged_branch_creates_pr_and_links_siblings(self, tmp_path: Path) -> None:
        github = FakeGitHub(
            assignable_users=["alice", "bob"],
            open_prs=[
                _pr(3, "[TRACK-7]: Backend for login"),
                _pr(8, "[TRACK-70]: Unrelated"),
                _pr(9, "TRACK-7 follow-up without brackets"),
            ],
        )
        prompter = FakePrompter(
            field_values={"description": "Adds the login form"}, reviewers=["bob"]
        )
        ctx = create_test_context(
            tmp_path,
            git=_login_branch(),
            github=github,
            prompter=prompter,
            config=_tracked_config(tmp_path),
        )

        result = run_workflow(ctx, update_only=False)

        assert result.draft.title == "[TRACK-7]: Add login form"
        assert result.draft.tag == "TRACK-7"
        assert result.draft.is_tracked
        assert result.pr_url == "https://github.com/owner/repo/pull/10"

        [(base, title, body, reviewers)] = github.created_prs
        assert base == "main"
        assert title == "[TRACK-7]: Add login form"
        assert reviewers == ["bob"]
        assert "Tracked by [TRACK-7](https://jira.example.com/browse/TRACK-7)" in body
        assert "Adds the login form" in body
        assert "<!-- IMPLEMENTATION -->" not in body

        expected_block = (
            "<!-- RELATED_PR -->\n"
            "- owner/repo/pull/3{mark3}\n"
            "- owner/repo/pull/10{mark10}\n"
            "<!-- /RELATED_PR -->"
        )
        updated = {number: new_body for number, _, new_body in github.updated_bodies}
        assert sorted(updated) == [3, 10]
        assert expected_block.format(mark3=" - (this pr)", mark10="") in updated[3]
        assert expected_block.format(mark3="", mark10=" - (this pr)") in updated[10]
        assert [o.status for o in result.outcomes] == ["updated", "updated"]

        assert TagHistory.load(tmp_path / "tags.txt").most_recent == "TRACK-7"
        assert prompter.asked == ["field", "field", "reviewers"]

    def test_login_branch_end_to_end(self, tmp_path: Path) -> None:
        github = FakeGitHub()
        ctx = create_test_context(
            tmp_path,
            git=_login_branch(["[AUTH-9]: add login", "wip"]),
            github=github,
            prompter=FakePrompter(field_values={"description": "Login page"}),
            config=_tracked_config(tmp_path),
        )

        branch_info = resolve_branch_lineage(ctx.git, ctx.cwd)
        assert branch_info.commits == ("wip", "[AUTH-9]: add login")
        assert branch_info.bases == ("main",)

        result = run_workflow(ctx, update_only=False)

        assert result.draft.tag == "AUTH-9"
        assert result.draft.title == "[AUTH-9]: add login"
        [(base, _, body, _)] = github.created_prs
        assert base == "main"
        assert "[AUTH-9](https://jira.example.com/browse/AUTH-9)" in body
        assert "<!--" not in body.split("<!-- RELATED_PR -->")[0]
        assert list(TagHistory.load(tmp_path / "tags.txt")) == ["AUTH-9"]

    def test_untagged_branch_prompts_for_title_and_tag(self, tmp_path: Path) -> None:
        github = FakeGitHub()
        prompter = FakePrompter(tag="OPS-1")
        ctx = create_test_context(
            tmp_path,
            git=_login_branch(["Add login form", "Polish login"]),
            github=github,
            prompter=prompter,
        )

        result = run_workflow(ctx, update_only=False)

        assert result.draft.title == "[OPS-1]: Add login form"
        assert not result.draft.is_tracked
        assert prompter.asked[:2] == ["title", "tag"]
        [(_, _, body, _)] = github.created_prs
        assert "Tracked by" not in body
        assert (tmp_path / "tags.txt").read_text(encoding="utf-8") == "OPS-1\n"

    def test_update_only_skips_creation(self, tmp_path: Path) -> None:
        github = FakeGitHub(open_prs=[_pr(3, "[TRACK-7]: a"), _pr(4, "[TRACK-7]: b")])
        prompter = FakePrompter()
        ctx = create_test_context(
            tmp_path,
            git=_login_branch(operation_in_progress=True),
            github=github,
            prompter=prompter,
        )

        result = run_workflow(ctx, update_only=True)

        assert result.pr_url is None
        assert github.created_prs == []
        assert prompter.asked == []
        assert [number for number, _, _ in github.updated_bodies] == [3, 4]

    def test_update_only_does_not_need_a_base(self, tmp_path: Path) -> None:
        git = FakeGit(
            commits=linear("l", ["[TRACK-7]: Add login form"]),
            local_branches={"feature/login": "l1"},
            current_branch="feature/login",
        )
        ctx = create_test_context(tmp_path, git=git, github=FakeGitHub())

        result = run_workflow(ctx, update_only=True)

        assert result.outcomes == ()

    def test_no_base_branch(self, tmp_path: Path) -> None:
        git = FakeGit(
            commits=linear("l", ["[TRACK-7]: Add login form"]),
            local_branches={"feature/login": "l1"},
            current_branch="feature/login",
        )
        github = FakeGitHub()
        ctx = create_test_context(tmp_path, git=git, github=github)

        with pytest.raises(NoBaseBranchError):
            run_workflow(ctx, update_only=False)

        assert github.created_prs == []

    def test_no_unique_commits(self, tmp_path: Path) -> None:
        git = FakeGit(
            commits=linear("m", ["init"]),
            local_branches={"main": "m1", "feature/login": "m1"},
            current_branch="feature/login",
        )
        ctx = create_test_context(tmp_path, git=git)

        with pytest.raises(NoCommitsError):
            run_workflow(ctx, update_only=False)

    def test_created_pr_missing_from_listing_is_fetched(self, tmp_path: Path) -> None:
        github = FakeGitHub(open_prs=[_pr(3, "[TRACK-7]: a")], list_includes_created=False)
        ctx = create_test_context(tmp_path, git=_login_branch(), github=github)

        result = run_workflow(ctx, update_only=False)

        assert [o.pr_number for o in result.outcomes] == [3, 4]
        updated = dict((number, body) for number, _, body in github.updated_bodies)
        assert "- owner/repo/pull/4 - (this pr)" in updated[4]

    def test_reviewer_listing_failure_is_not_fatal(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        github = FakeGitHub(assignable_users_error="HTTP 502")
        ctx = create_test_context(tmp_path, git=_login_branch(), github=github)

        run_workflow(ctx, update_only=False)

        [(_, _, _, reviewers)] = github.created_prs
        assert reviewers == []
        assert "skipping reviewers" in capsys.readouterr().err

    def test_dry_run_creates_and_updates_nothing(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        fake = FakeGitHub(open_prs=[_pr(3, "[TRACK-7]: a")])
        ctx = create_test_context(
            tmp_path, git=_login_branch(), github=DryRunGitHub(fake), dry_run=True
        )

        result = run_workflow(ctx, update_only=False)

        assert fake.created_prs == []
        assert fake.updated_bodies == []
        assert result.outcomes == (
            UpdateOutcome(pr_number=3, status="updated", detail="Dry run - no PR updated"),
        )
        err = capsys.readouterr().err
        assert "Dry run: gh commands are printed, not run" in err
        assert "[DRY RUN] Would run: gh pr create -B main" in err
        assert "[DRY RUN] Would run: gh pr edit 3 --repo owner/repo" in err

    def test_cancelled_prompt_stops_the_run(self, tmp_path: Path) -> None:
        github = FakeGitHub()
        ctx = create_test_context(
            tmp_path,
            git=_login_branch(["Add login form"]),
            github=github,
            prompter=FakePrompter(cancel_on="title"),
        )

        with pytest.raises(UserCancelledError):
            run_workflow(ctx, update_only=False)

        assert github.created_prs == []


class TestUpdateRelatedPrs:
    def test_failed_update_does_not_stop_the_others(self, tmp_path: Path) -> None:
        github = FakeGitHub(
            open_prs=[_pr(1, "[T-1]: a"), _pr(2, "[T-1]: b"), _pr(3, "[T-1]: c")],
            update_failures={2: "HTTP 403"},
        )
        ctx = create_test_context(tmp_path, github=github)

        outcomes = update_related_prs(ctx, Path("/repo"), "T-1")

        assert [(o.pr_number, o.status) for o in outcomes] == [
            (1, "updated"),
            (2, "failed"),
            (3, "updated"),
        ]
        assert "HTTP 403" in outcomes[1].detail
        assert [number for number, _, _ in github.updated_bodies] == [1, 3]

    def test_up_to_date_pr_is_unchanged(self, tmp_path: Path) -> None:
        current = (
            "intro\n<!-- RELATED_PR -->\n- owner/repo/pull/1 - (this pr)\n<!-- /RELATED_PR -->\n"
        )
        github = FakeGitHub(open_prs=[_pr(1, "[T-1]: a", body=current)])
        ctx = create_test_context(tmp_path, github=github)

        outcomes = update_related_prs(ctx, Path("/repo"), "T-1")

        assert [o.status for o in outcomes] == ["unchanged"]
        assert github.updated_bodies == []

    def test_pr_without_related_block_is_skipped(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        github = FakeGitHub(
            open_prs=[_pr(1, "[T-1]: a", body="no block here"), _pr(2, "[T-1]: b")]
        )
        ctx = create_test_context(tmp_path, github=github)

        outcomes = update_related_prs(ctx, Path("/repo"), "T-1")

        assert outcomes[0] == UpdateOutcome(
            pr_number=1, status="skipped", detail="no related-PR block"
        )
        assert outcomes[1].status == "updated"
        assert [number for number, _, _ in github.updated_bodies] == [2]
        assert "Skipped #1: no related-PR block" in capsys.readouterr().err

    def test_malformed_titles_are_reported(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        github = FakeGitHub(open_prs=[_pr(1, "T-1 missing brackets")])
        ctx = create_test_context(tmp_path, github=github)

        outcomes = update_related_prs(ctx, Path("/repo"), "T-1")

        assert outcomes == []
        err = capsys.readouterr().err
        assert "T-1 missing brackets" in err
        assert "No tag found" in err
        assert "No related PRs found." in err

    def test_configured_user_wins_over_gh_login(self, tmp_path: Path) -> None:
        github = FakeGitHub(authenticated_user=None, open_prs=[_pr(1, "[T-1]: a")])
        config = create_test_config(tmp_path, github_user="octocat")
        ctx = create_test_context(tmp_path, github=github, config=config)

        outcomes = update_related_prs(ctx, Path("/repo"), "T-1")

        assert [o.status for o in outcomes] == ["updated"]

    def test_unknown_user_is_an_error(self, tmp_path: Path) -> None:
        ctx = create_test_context(tmp_path, github=FakeGitHub(authenticated_user=None))

        with pytest.raises(GitHubCliError):
            update_related_prs(ctx, Path("/repo"), "T-1")

    def test_listing_failure_is_an_error(self, tmp_path: Path) -> None:
        ctx = create_test_context(tmp_path, github=FakeGitHub(list_prs_error="rate limited"))

        with pytest.raises(GitHubCliError):
            update_related_prs(ctx, Path("/repo"), "T-1")


class TestDraftAndBase:
    def test_empty_tag_is_missing(self, tmp_path: Path) -> None:
        info = BranchInfo(branch="f", bases=("main",), commits=("Add login",))
        history = TagHistory.load(tmp_path / "tags.txt")

        with pytest.raises(MissingTagError):
            build_draft_from_branch(FakePrompter(tag=""), info, history)

        assert history.is_empty()

    def test_tag_from_newest_tagged_commit(self, tmp_path: Path) -> None:
        info = BranchInfo(
            branch="f", bases=("main",), commits=("[B-2]: newer", "plain", "[A-1]: older")
        )
        history = TagHistory.load(tmp_path / "tags.txt")
        prompter = FakePrompter()

        draft = build_draft_from_branch(prompter, info, history)

        assert (draft.tag, draft.title) == ("B-2", "[B-2]: newer")
        assert prompter.info_lines == [("PR title", "[B-2]: newer"), ("PR Tag", "B-2")]

    def test_single_base_is_used_without_asking(self) -> None:
        prompter = FakePrompter()
        info = BranchInfo(branch="f", bases=("develop",), commits=("x",))

        assert select_base_branch(prompter, info) == "develop"
        assert prompter.asked == []
        assert prompter.info_lines == [("PR base", "develop")]

    def test_several_bases_are_prompted(self) -> None:
        prompter = FakePrompter(base="beta")
        info = BranchInfo(branch="f", bases=("alpha", "beta"), commits=("x",))

        assert select_base_branch(prompter, info) == "beta"
        assert prompter.asked == ["base"]
