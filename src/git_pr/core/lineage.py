"""Branch lineage resolution.

Works out which existing branch the current feature branch forked from and
which commits belong only to the feature branch.

The commit graph is read once into an arena (sha -> CommitRecord). Every other
branch's history is then walked to annotate each commit with the set of branch
names reaching it, and finally the current branch is walked from its tip until
the first annotated commit: the fork point. All walks use an explicit stack so
long histories never hit the recursion limit.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from git_pr.core.errors import (
    BranchNotCleanError,
    DetachedHeadError,
    NotInGitRepoError,
    ProtectedBranchError,
    RepositoryAccessError,
)
from git_pr.gateway.git.abc import CommitRecord, Git

logger = logging.getLogger(__name__)

PROTECTED_BRANCHES = frozenset({"main", "master", "development", "stage", "production"})


@dataclass(frozen=True)
class BranchInfo:
    """Lineage of the current branch.

    Attributes:
        branch: Name of the current branch
        bases: Candidate base branches. Empty when no other branch shares any
            history with the current one, otherwise exactly one name.
        commits: Trimmed messages of the commits unique to the current branch,
            ordered tip -> root
    """

    branch: str
    bases: tuple[str, ...]
    commits: tuple[str, ...]

    @property
    def default_title(self) -> str:
        """The root-most unique commit, the natural title for the whole branch."""
        return self.commits[-1] if self.commits else ""

    def title_suggestions(self, query: str) -> list[str]:
        """Unique commits containing query (case-insensitive), root-most first."""
        needle = query.lower()
        return [commit for commit in reversed(self.commits) if needle in commit.lower()]


def is_protected(branch: str, protected_branches: frozenset[str] = PROTECTED_BRANCHES) -> bool:
    return branch in protected_branches


def _strip_remote(name: str) -> str:
    """'origin/feature/a' -> 'feature/a'."""
    _, _, rest = name.partition("/")
    return rest


def walk_history(arena: dict[str, CommitRecord], head: str) -> Iterator[CommitRecord]:
    """Yield every commit reachable from head exactly once, tip first.

    Parents are visited first-parent first, so a linear history comes out in
    tip -> root order and a merge's mainline is followed before its side branch.

    Raises:
        KeyError: If a reachable commit is missing from the arena
    """
    seen: set[str] = set()
    stack = [head]
    while stack:
        sha = stack.pop()
        if sha in seen:
            continue
        seen.add(sha)
        commit = arena[sha]
        yield commit
        # reversed so the first parent is popped next
        stack.extend(p for p in reversed(commit.parents) if p not in seen)


def annotate_reachability(
    arena: dict[str, CommitRecord], heads: dict[str, str]
) -> dict[str, set[str]]:
    """Map each commit sha to the names of the branches that reach it.

    Args:
        arena: Commit records by sha
        heads: Branch name -> head sha for every branch to annotate
    """
    reached_by: dict[str, set[str]] = {}
    for name, head in heads.items():
        for commit in walk_history(arena, head):
            reached_by.setdefault(commit.sha, set()).add(name)
    return reached_by


def find_unique_commits(
    arena: dict[str, CommitRecord],
    head: str,
    reached_by: dict[str, set[str]],
    remote_branches: set[str],
) -> tuple[list[str], list[str]]:
    """Walk from head until the first commit another branch reaches.

    Returns:
        (commits, bases): messages of the commits before the fork point (tip ->
        root) and the base candidates, which hold the lexicographically first
        local branch at the fork point, or nothing if the walk hit the root
    """
    commits: list[str] = []
    for commit in walk_history(arena, head):
        owners = reached_by.get(commit.sha)
        if not owners:
            commits.append(commit.message.strip())
            continue
        local_owners = sorted(name for name in owners if name not in remote_branches)
        logger.debug("Fork point %s reached by %s", commit.sha[:12], ", ".join(sorted(owners)))
        return commits, local_owners[:1]
    return commits, []


def resolve_branch_lineage(
    git: Git,
    cwd: Path,
    *,
    protected_branches: frozenset[str] = PROTECTED_BRANCHES,
    require_clean: bool = True,
) -> BranchInfo:
    """Compute the base branch candidates and unique commits of the current branch.

    Args:
        git: Repository gateway
        cwd: Directory inside the repository
        protected_branches: Branch names that can never be feature branches
        require_clean: Refuse to run while a merge/rebase/... is in progress

    Raises:
        NotInGitRepoError: cwd is not inside a git repository
        BranchNotCleanError: an operation is in progress and require_clean is set
        DetachedHeadError: no branch is checked out
        ProtectedBranchError: the current branch is protected
        RepositoryAccessError: refs or commits could not be read
    """
    repo_root = git.get_repository_root(cwd)
    if repo_root is None:
        raise NotInGitRepoError()

    try:
        if require_clean and git.has_operation_in_progress(repo_root):
            raise BranchNotCleanError()

        current = git.get_current_branch(cwd)
        if current is None:
            raise DetachedHeadError()
        if is_protected(current, protected_branches):
            raise ProtectedBranchError(current)

        local_branches = git.list_local_branches(repo_root)
        remote_branches = git.list_remote_branches(repo_root)
    except RuntimeError as e:
        raise RepositoryAccessError("read repository state", str(e)) from e

    # (name, is_remote); the current branch first
    branch_refs = [(current, False)]
    branch_refs.extend((name, False) for name in local_branches if name != current)
    branch_refs.extend((name, True) for name in remote_branches if _strip_remote(name) != current)
    others = [name for name, _ in branch_refs[1:]]

    try:
        heads: dict[str, str] = {}
        for name, is_remote in branch_refs:
            head = git.get_branch_head(repo_root, name, remote=is_remote)
            if head is None:
                raise RepositoryAccessError(
                    "resolve branch", f"'{name}' does not point at a commit"
                )
            heads[name] = head
        arena = git.read_commits(repo_root, list(dict.fromkeys(heads.values())))
    except RuntimeError as e:
        raise RepositoryAccessError("read commit history", str(e)) from e

    try:
        reached_by = annotate_reachability(arena, {name: heads[name] for name in others})
        remotes = set(remote_branches)
        commits, bases = find_unique_commits(arena, heads[current], reached_by, remotes)
    except KeyError as e:
        raise RepositoryAccessError("walk commit history", f"missing commit {e}") from e

    logger.debug(
        "Branch %s: %d unique commit(s), base candidates %s",
        current,
        len(commits),
        bases or "none",
    )
    return BranchInfo(branch=current, bases=tuple(bases), commits=tuple(commits))
