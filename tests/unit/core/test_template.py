"""Tests for PR body rendering and the related-PR block rewriter."""

from git_pr.cli.config import FormField, Placeholders, TemplateConfig
from git_pr.core.template import has_related_section, render_body, rewrite_related_section
from git_pr.gateway.github.types import RemotePullRequest

TRACKED = TemplateConfig(tracking_url="https://jira.example.com/browse/")


def _pr(number: int, body: str = "", repo: str = "owner/repo") -> RemotePullRequest:
    return RemotePullRequest(
        id=f"PR_{number}",
        title=f"[T-1]: pr {number}",
        number=number,
        resource_path=f"/{repo}/pull/{number}",
        body=body,
    )


class TestRenderBody:
    def test_tracked_pr_gets_tracking_link(self) -> None:
        body = render_body(
            TRACKED,
            tag="TRACK-123",
            is_tracked=True,
            fields={"description": "Adds a new feature", "implementation": "Used library X"},
        )

        assert body.startswith(
            "Tracked by [TRACK-123](https://jira.example.com/browse/TRACK-123)\n"
        )
        assert "Adds a new feature" in body
        assert "Used library X" in body
        assert "<!-- THIS PR -->" not in body

    def test_untracked_pr_drops_tracking_line(self) -> None:
        body = render_body(
            TRACKED,
            tag="TAG-456",
            is_tracked=False,
            fields={"description": "Bug fix", "implementation": "Fixed the issue"},
        )

        assert "Tracked by" not in body
        assert "<!-- ISSUE_URL -->" not in body
        assert "Bug fix" in body

    def test_tracked_without_url_drops_tracking_line(self) -> None:
        body = render_body(
            TemplateConfig(),
            tag="TRACK-1",
            is_tracked=True,
            fields={"description": "x", "implementation": "y"},
        )

        assert "Tracked by" not in body

    def test_empty_field_removes_its_line(self) -> None:
        body = render_body(
            TRACKED,
            tag="T-1",
            is_tracked=True,
            fields={"description": "   ", "implementation": "impl"},
        )

        assert "<!-- THIS PR -->" not in body
        assert "## What is this PR doing?\n\n\n## Considerations" in body
        assert "impl" in body

    def test_missing_field_removes_its_line(self) -> None:
        body = render_body(TRACKED, tag="T-1", is_tracked=True, fields={"description": "desc"})

        assert "<!-- IMPLEMENTATION -->" not in body
        assert "desc" in body

    def test_values_are_not_rescanned_for_placeholders(self) -> None:
        body = render_body(
            TRACKED,
            tag="T-1",
            is_tracked=True,
            fields={"description": "see <!-- IMPLEMENTATION -->", "implementation": "impl"},
        )

        assert "see <!-- IMPLEMENTATION -->" in body
        assert "\n\nimpl\n" in body

    def test_related_markers_are_kept(self) -> None:
        body = render_body(TRACKED, tag="T-1", is_tracked=True, fields={})

        assert "<!-- RELATED_PR -->\n<!-- /RELATED_PR -->" in body

    def test_custom_template_and_fields(self) -> None:
        template = TemplateConfig(
            body="# PR: <!-- ISSUE_URL -->\n\n## Risk\n{{RISK}}\n",
            fields=(FormField(name="risk", prompt="Risk:", placeholder="{{RISK}}"),),
            tracking_url="https://t/",
        )

        body = render_body(template, tag="FEAT-9", is_tracked=True, fields={"risk": "low"})

        assert body == "# PR: [FEAT-9](https://t/FEAT-9)\n\n## Risk\nlow\n"


class TestRewriteRelatedSection:
    BODY = "Some text\n<!-- RELATED_PR -->\n- old/stuff\n<!-- /RELATED_PR -->\nMore text"

    def test_replaces_block_and_marks_current_pr(self) -> None:
        result = rewrite_related_section(
            self.BODY, 1, [_pr(1), _pr(2)], placeholders=Placeholders()
        )

        assert result == (
            "Some text\n"
            "<!-- RELATED_PR -->\n"
            "- owner/repo/pull/1 - (this pr)\n"
            "- owner/repo/pull/2\n"
            "<!-- /RELATED_PR -->\n"
            "More text"
        )

    def test_is_idempotent(self) -> None:
        related = [_pr(1), _pr(2)]
        once = rewrite_related_section(self.BODY, 2, related, placeholders=Placeholders())

        twice = rewrite_related_section(once, 2, related, placeholders=Placeholders())

        assert twice == once

    def test_body_without_block_is_unchanged(self) -> None:
        body = "No related section here"

        assert rewrite_related_section(body, 1, [_pr(1)], placeholders=Placeholders()) == body

    def test_markers_must_start_and_end_lines(self) -> None:
        body = "inline <!-- RELATED_PR --> x <!-- /RELATED_PR --> text"

        assert rewrite_related_section(body, 1, [_pr(1)], placeholders=Placeholders()) == body

    def test_only_first_block_is_rewritten(self) -> None:
        body = (
            "<!-- RELATED_PR -->\n- a\n<!-- /RELATED_PR -->\n"
            "middle\n"
            "<!-- RELATED_PR -->\n- b\n<!-- /RELATED_PR -->"
        )

        result = rewrite_related_section(body, 1, [_pr(1)], placeholders=Placeholders())

        assert result == (
            "<!-- RELATED_PR -->\n- owner/repo/pull/1 - (this pr)\n<!-- /RELATED_PR -->\n"
            "middle\n"
            "<!-- RELATED_PR -->\n- b\n<!-- /RELATED_PR -->"
        )

    def test_custom_markers(self) -> None:
        placeholders = Placeholders(
            related_pr_start="{{RELATED_START}}", related_pr_end="{{RELATED_END}}"
        )
        body = "Some text\n{{RELATED_START}}\n- old/stuff\n{{RELATED_END}}\nMore text"

        result = rewrite_related_section(body, 1, [_pr(1)], placeholders=placeholders)

        assert "{{RELATED_START}}\n- owner/repo/pull/1 - (this pr)\n{{RELATED_END}}" in result
        assert "old/stuff" not in result

    def test_empty_related_list_leaves_empty_block(self) -> None:
        result = rewrite_related_section(self.BODY, 1, [], placeholders=Placeholders())

        assert "<!-- RELATED_PR -->\n<!-- /RELATED_PR -->" in result

    def test_prs_from_other_repositories(self) -> None:
        result = rewrite_related_section(
            self.BODY, 1, [_pr(1), _pr(7, repo="owner/other")], placeholders=Placeholders()
        )

        assert "- owner/other/pull/7\n" in result


def test_has_related_section() -> None:
    placeholders = Placeholders()
    body = "x\n<!-- RELATED_PR -->\n<!-- /RELATED_PR -->"

    assert has_related_section(body, placeholders=placeholders)
    assert not has_related_section("No related section here", placeholders=placeholders)
    assert not has_related_section(
        "inline <!-- RELATED_PR --> x <!-- /RELATED_PR --> text", placeholders=placeholders
    )
