"""Read-only repository gateway.

Import from submodules:
- abc: Git, CommitRecord
- real: RealGit
- fake: FakeGit
"""
