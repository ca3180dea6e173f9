"""Interactive prompt gateway.

Import from submodules:
- abc: Prompter, PromptStyle
- real: ClickPrompter
- fake: FakePrompter
"""
