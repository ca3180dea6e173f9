"""PR body rendering and the related-PR block rewriter."""

import re
from collections.abc import Mapping, Sequence

from git_pr.cli.config import Placeholders, TemplateConfig
from git_pr.gateway.github.types import RemotePullRequest

THIS_PR_SUFFIX = " - (this pr)"


def _drop_lines_containing(body: str, markers: Sequence[str]) -> str:
    if not markers:
        return body
    lines = body.splitlines(keepends=True)
    return "".join(line for line in lines if not any(marker in line for marker in markers))


def render_body(
    template: TemplateConfig,
    *,
    tag: str,
    is_tracked: bool,
    fields: Mapping[str, str],
) -> str:
    """Render the PR body from the template.

    Each field placeholder is replaced by the matching value from fields. A line
    whose placeholder has no value, or only whitespace, is removed entirely, as is
    the tracking line unless the PR is tracked and a tracking URL is configured.
    Substitution happens in one pass, so values that themselves contain a
    placeholder are left as written. Related-PR markers are kept for
    rewrite_related_section.

    Args:
        template: Body text, placeholder markers, fields and tracking URL
        tag: Tag of the PR, e.g. "TRACK-123"
        is_tracked: Whether the tag refers to a ticket in the tracker
        fields: Field name -> value
    """
    replacements: dict[str, str] = {}
    empty_markers: list[str] = []

    issue_marker = template.placeholders.issue_url
    if is_tracked and template.tracking_url:
        replacements[issue_marker] = f"[{tag}]({template.tracking_url}{tag})"
    else:
        empty_markers.append(issue_marker)

    for form_field in template.fields:
        value = fields.get(form_field.name)
        if value is None or not value.strip():
            empty_markers.append(form_field.placeholder)
        else:
            replacements[form_field.placeholder] = value

    body = _drop_lines_containing(template.body, empty_markers)
    if not replacements:
        return body

    # longest first so a marker that prefixes another never shadows it
    pattern = re.compile(
        "|".join(re.escape(marker) for marker in sorted(replacements, key=len, reverse=True))
    )
    return pattern.sub(lambda match: replacements[match.group(0)], body)


def format_related_block(
    current_pr_number: int,
    related_prs: Sequence[RemotePullRequest],
    placeholders: Placeholders,
) -> str:
    lines = [placeholders.related_pr_start]
    for pr in related_prs:
        entry = f"- {pr.resource_path.lstrip('/')}"
        if pr.number == current_pr_number:
            entry += THIS_PR_SUFFIX
        lines.append(entry)
    lines.append(placeholders.related_pr_end)
    return "\n".join(lines)


def _related_block_pattern(placeholders: Placeholders) -> re.Pattern[str]:
    start = re.escape(placeholders.related_pr_start)
    end = re.escape(placeholders.related_pr_end)
    return re.compile(rf"^{start}.*?{end}$", re.DOTALL | re.MULTILINE)


def has_related_section(body: str, *, placeholders: Placeholders) -> bool:
    return _related_block_pattern(placeholders).search(body) is not None


def rewrite_related_section(
    body: str,
    current_pr_number: int,
    related_prs: Sequence[RemotePullRequest],
    *,
    placeholders: Placeholders,
) -> str:
    """Replace the related-PR block of body with the current list of related PRs.

    The block runs from the start marker (at the beginning of a line) to the
    nearest end marker (at the end of a line). Only the first block is rewritten
    and a body without one is returned unchanged, so rewriting twice with the
    same PRs yields the same text.
    """
    block = format_related_block(current_pr_number, related_prs, placeholders)
    return _related_block_pattern(placeholders).sub(lambda _match: block, body, count=1)
