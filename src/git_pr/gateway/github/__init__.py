"""GitHub hosting gateway backed by the gh CLI.

Import from submodules:
- abc: GitHub
- real: RealGitHub
- fake: FakeGitHub
- dry_run: DryRunGitHub
- types: RemotePullRequest
"""
