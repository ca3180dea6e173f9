"""Configuration loading.

git-pr keeps its state in a configuration directory (``~/.config/git-pr`` by
default): an optional ``config.toml`` and the tag history ``tags.txt``.

Example config.toml:

    [github]
    user = "octocat"            # defaults to $GITHUB_USER, then `gh api user`

    [tracking]
    url = "https://company.atlassian.net/browse/"   # defaults to $JIRA_URL

    [tags]
    max_history = 10

    [template]
    body = '''
    Tracked by <!-- ISSUE_URL -->
    ...
    '''

    [template.placeholders]
    issue_url = "<!-- ISSUE_URL -->"
    related_pr_start = "<!-- RELATED_PR -->"
    related_pr_end = "<!-- /RELATED_PR -->"

    [[fields]]
    name = "description"
    prompt = "What is this PR doing:"
    type = "editor"             # or "text"
    required = false
    placeholder = "<!-- THIS PR -->"

    [prompt]
    prefix = ">"
    color = "bright_green"
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from git_pr.core.errors import ConfigError
from git_pr.gateway.prompt.abc import PromptStyle

logger = logging.getLogger(__name__)

PKG_NAME = "git-pr"
CONFIG_FILE_NAME = "config.toml"
TAGS_FILE_NAME = "tags.txt"

FieldType = Literal["editor", "text"]

DEFAULT_BODY = """\
Tracked by <!-- ISSUE_URL -->

## What is this PR doing?

<!-- THIS PR -->

## Considerations and implementation

<!-- IMPLEMENTATION -->

## Related PRs

<!-- RELATED_PR -->
<!-- /RELATED_PR -->
"""


@dataclass(frozen=True)
class Placeholders:
    """Literal marker strings recognized in the template body."""

    issue_url: str = "<!-- ISSUE_URL -->"
    related_pr_start: str = "<!-- RELATED_PR -->"
    related_pr_end: str = "<!-- /RELATED_PR -->"


@dataclass(frozen=True)
class FormField:
    """A named value gathered interactively and substituted into the body."""

    name: str
    prompt: str
    placeholder: str
    field_type: FieldType = "editor"
    required: bool = False
    default: str | None = None


DEFAULT_FIELDS = (
    FormField(
        name="description",
        prompt="What is this PR doing:",
        placeholder="<!-- THIS PR -->",
    ),
    FormField(
        name="implementation",
        prompt="Considerations and implementation:",
        placeholder="<!-- IMPLEMENTATION -->",
    ),
)


@dataclass(frozen=True)
class TemplateConfig:
    """Everything the renderer needs: body text, markers, fields, tracking URL."""

    body: str = DEFAULT_BODY
    placeholders: Placeholders = field(default_factory=Placeholders)
    fields: tuple[FormField, ...] = DEFAULT_FIELDS
    tracking_url: str | None = None


@dataclass(frozen=True)
class GitPrConfig:
    """In-memory representation of the configuration directory."""

    config_dir: Path
    template: TemplateConfig
    github_user: str | None
    max_tag_history: int
    prompt_style: PromptStyle

    @property
    def tags_path(self) -> Path:
        return self.config_dir / TAGS_FILE_NAME


def default_config_dir() -> Path:
    """~/.config/git-pr (honoring XDG_CONFIG_HOME)."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / PKG_NAME


def resolve_config_dir(option: Path | None) -> Path:
    """Pick the configuration directory: --config, then $GIT_PR_CONFIG, then the default.

    The directory is created when missing.
    """
    if option is not None:
        config_dir = option
    elif os.environ.get("GIT_PR_CONFIG"):
        config_dir = Path(os.environ["GIT_PR_CONFIG"])
    else:
        config_dir = default_config_dir()
    config_dir = config_dir.expanduser()
    ensure_config_dir_exists(config_dir)
    return config_dir


def ensure_config_dir_exists(config_dir: Path) -> None:
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(
            f"{config_dir}: cannot create configuration directory: {e.strerror or e}"
        ) from e


def _expect(value: Any, expected: type, key: str, cfg_path: Path) -> Any:
    if not isinstance(value, expected):
        raise ConfigError(
            f"{cfg_path}: '{key}' must be a {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _load_table(data: dict[str, Any], key: str, cfg_path: Path) -> dict[str, Any]:
    return _expect(data.get(key, {}), dict, key, cfg_path)


def _marker(value: Any, key: str, cfg_path: Path) -> str:
    """A placeholder string; an empty one would match everywhere in the body."""
    marker = str(value)
    if not marker.strip():
        raise ConfigError(f"{cfg_path}: '{key}' must not be empty")
    return marker


def _parse_field(raw: Any, index: int, cfg_path: Path) -> FormField:
    key = f"fields[{index}]"
    raw = _expect(raw, dict, key, cfg_path)
    if "name" not in raw:
        raise ConfigError(f"{cfg_path}: '{key}' is missing 'name'")
    name = str(raw["name"])
    field_type = str(raw.get("type", "editor"))
    if field_type not in ("editor", "text"):
        raise ConfigError(
            f"{cfg_path}: '{key}.type' must be 'editor' or 'text', got '{field_type}'"
        )
    default = raw.get("default")
    return FormField(
        name=name,
        prompt=str(raw.get("prompt", f"{name}:")),
        placeholder=_marker(
            raw.get("placeholder", f"<!-- {name.upper()} -->"), f"{key}.placeholder", cfg_path
        ),
        field_type=field_type,  # type: ignore[arg-type]
        required=bool(_expect(raw.get("required", False), bool, f"{key}.required", cfg_path)),
        default=str(default) if default is not None else None,
    )


def load_config(config_dir: Path) -> GitPrConfig:
    """Load config.toml from config_dir if present; otherwise return defaults.

    Environment fallbacks: GITHUB_USER for the GitHub login and JIRA_URL for the
    tracking URL.

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    cfg_path = config_dir / CONFIG_FILE_NAME
    data: dict[str, Any] = {}
    if cfg_path.exists():
        try:
            data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"{cfg_path}: invalid TOML: {e}") from e
        except UnicodeDecodeError as e:
            raise ConfigError(f"{cfg_path}: not valid UTF-8 text ({e.reason})") from e
        except OSError as e:
            raise ConfigError(f"{cfg_path}: cannot read config: {e.strerror or e}") from e
        logger.debug("Loaded config from %s", cfg_path)
    else:
        logger.debug("No config at %s, using defaults", cfg_path)

    github = _load_table(data, "github", cfg_path)
    github_user = github.get("user") or os.environ.get("GITHUB_USER") or None

    tracking = _load_table(data, "tracking", cfg_path)
    tracking_url = tracking.get("url") or os.environ.get("JIRA_URL") or None

    tags = _load_table(data, "tags", cfg_path)
    max_tag_history = _expect(tags.get("max_history", 10), int, "tags.max_history", cfg_path)
    if max_tag_history < 1:
        raise ConfigError(f"{cfg_path}: 'tags.max_history' must be at least 1")

    template_table = _load_table(data, "template", cfg_path)
    placeholder_table = _load_table(template_table, "placeholders", cfg_path)
    defaults = Placeholders()
    placeholders = Placeholders(
        **{
            name: _marker(
                placeholder_table.get(name, getattr(defaults, name)),
                f"template.placeholders.{name}",
                cfg_path,
            )
            for name in ("issue_url", "related_pr_start", "related_pr_end")
        }
    )

    raw_fields = _expect(data.get("fields", []), list, "fields", cfg_path)
    fields = (
        tuple(_parse_field(raw, i, cfg_path) for i, raw in enumerate(raw_fields))
        if raw_fields
        else DEFAULT_FIELDS
    )

    template = TemplateConfig(
        body=str(template_table.get("body", DEFAULT_BODY)),
        placeholders=placeholders,
        fields=fields,
        tracking_url=str(tracking_url) if tracking_url else None,
    )

    prompt = _load_table(data, "prompt", cfg_path)
    style_defaults = PromptStyle()
    prompt_style = PromptStyle(
        prefix=str(prompt.get("prefix", style_defaults.prefix)),
        color=str(prompt.get("color", style_defaults.color)),
        highlight=str(prompt.get("highlight", style_defaults.highlight)),
    )

    return GitPrConfig(
        config_dir=config_dir,
        template=template,
        github_user=str(github_user) if github_user else None,
        max_tag_history=max_tag_history,
        prompt_style=prompt_style,
    )
