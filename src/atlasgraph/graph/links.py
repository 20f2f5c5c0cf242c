"""Wikilinks - [[Title]] cross-reference syntax in node labels."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

# Title text runs up to the first closing "]]"; no escaping rules.
WIKILINK_RE = re.compile(r"\[\[([^\]]+)\]\]")


@dataclass(frozen=True)
class TextToken:
    value: str


@dataclass(frozen=True)
class LinkToken:
    title: str


WikilinkToken = Union[TextToken, LinkToken]


def parse_wikilinks(text: str) -> list[WikilinkToken]:
    """Split text into plain-text and link tokens.

    Text between links is preserved verbatim. Link titles are trimmed,
    and links whose title is blank are dropped (the surrounding text is
    kept).

    Args:
        text: Label text to tokenize.

    Returns:
        Tokens in source order.
    """
    tokens: list[WikilinkToken] = []
    last_index = 0
    for match in WIKILINK_RE.finditer(text):
        start, end = match.span()
        if start > last_index:
            tokens.append(TextToken(text[last_index:start]))
        title = match.group(1).strip()
        if title:
            tokens.append(LinkToken(title))
        last_index = end
    if last_index < len(text):
        tokens.append(TextToken(text[last_index:]))
    return tokens


def extract_outbound_titles(text: str) -> list[str]:
    """Return the link titles referenced from text, in order.

    Repeated links are returned once per occurrence.

    >>> extract_outbound_titles("See [[Project Plan]] and [[ Budget ]]")
    ['Project Plan', 'Budget']
    """
    titles = []
    for match in WIKILINK_RE.finditer(text):
        title = match.group(1).strip()
        if title:
            titles.append(title)
    return titles
