"""Transliteration of human-readable names into URL-safe slugs."""
import re
import unicodedata
from types import MappingProxyType

from shared.config.settings import ALIAS_MAX_LENGTH

FALLBACK_SLUG = "item"

_CYRILLIC_TO_LATIN = {
    "а": "a", "б": "b", "в": "v", "г": "g", "ґ": "g", "д": "d", "е": "e",
    "ё": "e", "є": "ie", "ж": "zh", "з": "z", "и": "i", "і": "i", "ї": "i",
    "й": "i", "к": "k", "л": "l", "м": "m", "н": "n", "о": "o", "п": "p",
    "р": "r", "с": "s", "т": "t", "у": "u", "ф": "f", "х": "h", "ц": "ts",
    "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "", "ы": "y", "ь": "", "э": "e",
    "ю": "yu", "я": "ya",
}

# Russian and Ukrainian letters, both cases
TRANSLIT_TABLE = MappingProxyType({
    **_CYRILLIC_TO_LATIN,
    **{letter.upper(): latin for letter, latin in _CYRILLIC_TO_LATIN.items()},
})

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")
_HYPHEN_RUN = re.compile(r"-{2,}")


def transliterate(text: str) -> str:
    return "".join(TRANSLIT_TABLE.get(ch, ch) for ch in text)


def to_slug(text: str, max_len: int = ALIAS_MAX_LENGTH) -> str:
    """Maps arbitrary text onto ``[a-z0-9]`` words joined by single hyphens.

    Never fails and never returns an empty string; the result is at most
    ``max_len`` characters and ``to_slug(to_slug(x)) == to_slug(x)``.
    """
    decomposed = unicodedata.normalize("NFKD", transliterate(text))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))

    slug = _NON_SLUG_RUN.sub("-", stripped.lower())
    slug = _HYPHEN_RUN.sub("-", slug).strip("-")

    # cutting can expose a hyphen at the end
    slug = slug[:max_len].rstrip("-")
    return slug or FALLBACK_SLUG
