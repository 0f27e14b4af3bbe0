"""
Text processing for model replies and published pages.

Models often wrap JSON in Markdown fences even when told not to; fences are
stripped before decoding. Page titles are turned into URL slugs here too.
"""

import re
import unicodedata

_FENCE_OPEN = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def strip_code_fences(text: str) -> str:
    """
    Remove a surrounding ```json ... ``` (or bare ```) fence and outer whitespace.
    Text without a fence is returned stripped and otherwise unchanged.
    """
    if not text:
        return ""
    text = text.strip()
    if not text.startswith("```"):
        return text
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def slugify(text: str) -> str:
    """
    Lowercase ASCII slug: accents folded, runs of anything that is not an ASCII
    letter or digit collapsed to a single '-', no leading or trailing '-'.
    """
    if not text or not text.strip():
        return ""
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch)).lower()
    return _NON_ALNUM.sub("-", text).strip("-")
