"""Selection of the open PRs that share a tag."""

from collections.abc import Iterable
from dataclasses import dataclass

from git_pr.core.tags import extract_from_str
from git_pr.gateway.github.types import RemotePullRequest


@dataclass(frozen=True)
class RelatedPrMatch:
    """Result of matching open PRs against a tag.

    Attributes:
        matched: PRs whose title tag equals the tag, ordered by number
        malformed: PRs whose title mentions the tag without a bracketed tag
    """

    matched: tuple[RemotePullRequest, ...]
    malformed: tuple[RemotePullRequest, ...]


def match_related_prs(tag: str, prs: Iterable[RemotePullRequest]) -> RelatedPrMatch:
    """Find the PRs related to tag.

    A substring hit is not enough: "[TRACK-12]: x" mentions "TRACK-1" but its tag
    is TRACK-12, so it is not related to TRACK-1.
    """
    matched: list[RemotePullRequest] = []
    malformed: list[RemotePullRequest] = []
    for pr in prs:
        if tag not in pr.title:
            continue
        title_tag = extract_from_str(pr.title)
        if title_tag is None:
            malformed.append(pr)
        elif title_tag == tag:
            matched.append(pr)
    matched.sort(key=lambda pr: pr.number)
    return RelatedPrMatch(matched=tuple(matched), malformed=tuple(malformed))
