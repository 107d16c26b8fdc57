"""Text cleanup applied to description-class fields before TOON encoding."""

import re
from typing import Optional

_IMAGE_PATTERN = re.compile(r"!\[[^\]]*\]\([^)]+\)")
_MULTI_SPACE = re.compile(r" {2,}")

_ISSUE_LINK = re.compile(
    r"\[([^\]]*)\]\(<?https?://linear\.app/[^/]+/issue/([A-Z]+-\d+)(?:/[^)>]*)?>?\)",
    re.IGNORECASE,
)
_ISSUE_URL = re.compile(
    r"https?://linear\.app/[^/]+/issue/([A-Z]+-\d+)(?:/[^\s)>\]]*)?",
    re.IGNORECASE,
)
_ISSUE_URL_IN_TEXT = re.compile(r"linear\.app/[^/]+/issue/([A-Z]+-\d+)", re.IGNORECASE)

_PROJECT_LINK = re.compile(
    r"\[([^\]]*)\]\(<?https?://linear\.app/[^/]+/project/([A-Za-z0-9-]+)(?:/[^)>]*)?>?\)"
)
_PROJECT_URL = re.compile(
    r"https?://linear\.app/[^/]+/project/([A-Za-z0-9-]+)(?:/[^\s)>\]]*)?"
)
_HEX = re.compile(r"^[a-f0-9]+$")

# Zero-width markers keep protected links out of the bare-URL pass.
_PLACEHOLDER = re.compile("​​MDLNK(\\d+)​​")


def strip_markdown_images(text: Optional[str]) -> Optional[str]:
    """
    Strip markdown images and append an image count.

    Examples:
        >>> strip_markdown_images("See ![screenshot](https://x/y.png) here")
        'See here [1 image]'
        >>> strip_markdown_images("![only](url)")
        '[1 image]'
    """
    if not text:
        return "" if text == "" else None

    count = len(_IMAGE_PATTERN.findall(text))
    if count == 0:
        return text

    result = _MULTI_SPACE.sub(" ", _IMAGE_PATTERN.sub("", text))
    suffix = "[1 image]" if count == 1 else f"[{count} images]"

    if not result.strip():
        return suffix
    return f"{result.rstrip()} {suffix}"


def strip_issue_urls(text: Optional[str]) -> Optional[str]:
    """
    Replace issue URLs with bare identifiers.

    - ``[SQT-297](https://linear.app/ws/issue/SQT-297/slug)`` -> ``SQT-297``
    - ``[url](<url>)`` for the same issue -> identifier
    - ``https://linear.app/ws/issue/SQT-297/slug`` -> ``SQT-297``

    Markdown links with custom link text are preserved.
    """
    if not text:
        return "" if text == "" else None

    placeholders: list[str] = []

    def _collapse_link(match: re.Match) -> str:
        link_text, identifier = match.group(1), match.group(2).upper()
        if link_text.upper() == identifier:
            return identifier
        inner = _ISSUE_URL_IN_TEXT.search(link_text)
        if inner and inner.group(1).upper() == identifier:
            return identifier
        placeholders.append(match.group(0))
        return f"​​MDLNK{len(placeholders) - 1}​​"

    result = _ISSUE_LINK.sub(_collapse_link, text)
    result = _ISSUE_URL.sub(lambda m: m.group(1).upper(), result)

    if placeholders:
        result = _PLACEHOLDER.sub(lambda m: placeholders[int(m.group(1))], result)

    return result


def _lookup_project_slug(slug: str, slug_map: dict[str, str]) -> Optional[str]:
    key = slug_map.get(slug)
    if key is not None:
        return key
    last_hyphen = slug.rfind("-")
    if last_hyphen > 0:
        suffix = slug[last_hyphen + 1 :]
        if _HEX.match(suffix):
            return slug_map.get(suffix)
    return None


def strip_project_urls(text: Optional[str], slug_map: Optional[dict[str, str]]) -> Optional[str]:
    """
    Replace project URLs with project short keys.

    Resolution uses the registry's slug index: full slugId, then the hex hash
    suffix, then (for markdown links) the lower-cased link text. Links that
    cannot be resolved are left untouched.
    """
    if not text or not slug_map:
        return text

    def _replace_link(match: re.Match) -> str:
        link_text, slug = match.group(1), match.group(2)
        key = _lookup_project_slug(slug, slug_map) or slug_map.get(link_text.strip().lower())
        return key if key is not None else match.group(0)

    def _replace_url(match: re.Match) -> str:
        key = _lookup_project_slug(match.group(1), slug_map)
        return key if key is not None else match.group(0)

    result = _PROJECT_LINK.sub(_replace_link, text)
    return _PROJECT_URL.sub(_replace_url, result)
