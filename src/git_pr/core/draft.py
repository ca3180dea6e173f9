"""The pull request being assembled before it is published."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PullRequestDraft:
    """Values gathered for a new pull request.

    Built up step by step with dataclasses.replace and never persisted.

    Attributes:
        title: Full PR title, e.g. "[TRACK-123]: Add login"
        tag: Tag of the PR, e.g. "TRACK-123"
        is_tracked: Whether the tag came from the branch commits and refers to a
            ticket in the tracker
        base: Branch the PR targets, empty until selected
        fields: Form field name -> entered text
        reviewers: Logins to request review from
    """

    title: str
    tag: str
    is_tracked: bool
    base: str = ""
    fields: dict[str, str] = field(default_factory=dict)
    reviewers: tuple[str, ...] = ()
