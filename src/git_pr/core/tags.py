"""Tag extraction and the most-recently-used tag history.

A tag is a short classification token such as ``TRACK-123``. In commit messages
and PR titles it always appears between square brackets: ``[TRACK-123]: Add login``.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from git_pr.core.errors import TagHistoryError

logger = logging.getLogger(__name__)

DEFAULT_MAX_TAGS = 10

# A word character followed by word characters or hyphens, between brackets.
_TOKEN = r"\w[\w-]*"
TAG_PATTERN = re.compile(rf"\[({_TOKEN})\]")
_BARE_TAG_PATTERN = re.compile(rf"\[?({_TOKEN})\]?")


def extract_from_str(text: str) -> str | None:
    """Extract the first bracketed tag from text.

    "[TRACK-123]: Add feature" -> "TRACK-123"; "TRACK-123 without brackets" -> None.
    """
    match = TAG_PATTERN.search(text)
    if match is None:
        return None
    return match.group(1)


def extract_from_many(texts: Iterable[str]) -> tuple[str, str] | None:
    """Find the first text that carries a tag.

    Returns:
        (tag, text) for the first text in iteration order containing a tag,
        or None when no text does
    """
    for text in texts:
        tag = extract_from_str(text)
        if tag is not None:
            return tag, text
    return None


def is_valid_tag(text: str) -> bool:
    """Check whether user input is a usable tag, with or without brackets."""
    match = _BARE_TAG_PATTERN.fullmatch(text.strip())
    if match is None:
        return False
    stripped = text.strip()
    # brackets must come as a pair
    return stripped.startswith("[") == stripped.endswith("]")


def normalize_tag(text: str) -> str:
    """Strip surrounding whitespace and brackets from a user-entered tag."""
    return text.strip().removeprefix("[").removesuffix("]")


class TagHistory:
    """Bounded most-recently-used list of tags backed by a flat file.

    The file holds one tag per line, most recent first. Tags are unique: adding a
    tag that is already present moves it to the front.
    """

    def __init__(self, path: Path, tags: list[str], *, max_size: int = DEFAULT_MAX_TAGS) -> None:
        self._path = path
        self._tags = tags[:max_size]
        self._max_size = max_size

    @classmethod
    def load(cls, path: Path, *, max_size: int = DEFAULT_MAX_TAGS) -> "TagHistory":
        """Load the history from path. A missing file yields an empty history.

        Raises:
            TagHistoryError: If the file exists but cannot be read as UTF-8 text
        """
        if not path.exists():
            logger.debug("No tag history at %s", path)
            return cls(path, [], max_size=max_size)

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise TagHistoryError(path, f"not valid UTF-8 text ({e.reason})") from e
        except OSError as e:
            raise TagHistoryError(path, f"cannot read tag history: {e.strerror or e}") from e

        tags: list[str] = []
        for line in content.splitlines():
            tag = line.strip()
            if tag and tag not in tags:
                tags.append(tag)
        logger.debug("Loaded %d tags from %s", len(tags), path)
        return cls(path, tags, max_size=max_size)

    def add(self, tag: str) -> None:
        """Insert tag at the front, dropping any older occurrence and the overflow."""
        if tag in self._tags:
            self._tags.remove(tag)
        self._tags.insert(0, tag)
        del self._tags[self._max_size :]

    def save(self) -> None:
        """Overwrite the backing file with the current tags.

        Raises:
            TagHistoryError: If the file or its directory cannot be written
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text("".join(f"{tag}\n" for tag in self._tags), encoding="utf-8")
        except OSError as e:
            raise TagHistoryError(self._path, f"cannot write tag history: {e.strerror or e}") from e

    def add_and_save(self, tag: str) -> None:
        self.add(tag)
        self.save()

    def is_empty(self) -> bool:
        return not self._tags

    def iter(self) -> Iterator[str]:
        return iter(list(self._tags))

    def __iter__(self) -> Iterator[str]:
        return self.iter()

    def __len__(self) -> int:
        return len(self._tags)

    @property
    def most_recent(self) -> str | None:
        return self._tags[0] if self._tags else None

    def suggestions(self, prefix: str) -> list[str]:
        """Tags starting with prefix, most recent first."""
        return [tag for tag in self._tags if tag.startswith(prefix)]
