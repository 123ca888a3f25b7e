"""HTML to LaTeX transcoding driven by a tag rule table.

The conversion runs in four steps:

1. Text found outside tag boundaries is entity-encoded while the tags
   themselves pass through untouched, so stray ``&``, ``<`` or ``>`` in prose
   survive the parse.
2. The escaped markup is parsed leniently with BeautifulSoup. html5lib closes
   implied elements the way browsers do, so an unclosed ``<p>`` ends where the
   next one starts.
3. Every element is collected in document order before any mutation, then
   visited from the last to the first. Elements whose tag has a rule are
   replaced by a ``div`` holding the substituted template as literal text.
4. The remaining tags are stripped and entities decoded, which is what
   collecting the tree's text yields.
"""

from __future__ import annotations

from collections.abc import Iterable
import html
import logging
import re

from bs4 import BeautifulSoup, FeatureNotFound

from .rules import DEFAULT_RULES, RuleLike, RuleTable


logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"</?[a-z]+[^>]*>", re.IGNORECASE)
_ENTITY_PATTERN = re.compile(r"&(?:[A-Za-z][A-Za-z0-9]*|#[0-9]+|#[xX][0-9A-Fa-f]+);")

WRAPPER_TAG = "div"
DEFAULT_PARSER = "html5lib"
FALLBACK_PARSER = "html.parser"


def _encode_text(segment: str) -> str:
    """Entity-encode ``segment`` without touching entities already present."""
    parts: list[str] = []
    position = 0
    for match in _ENTITY_PATTERN.finditer(segment):
        parts.append(html.escape(segment[position : match.start()], quote=True))
        parts.append(match.group(0))
        position = match.end()
    parts.append(html.escape(segment[position:], quote=True))
    return "".join(parts)


def escape_outside_tags(markup: str) -> str:
    """Encode special characters in the text between tags only."""
    parts: list[str] = []
    position = 0
    for match in TAG_PATTERN.finditer(markup):
        parts.append(_encode_text(markup[position : match.start()]))
        parts.append(match.group(0))
        position = match.end()
    parts.append(_encode_text(markup[position:]))
    return "".join(parts)


class MarkupTranscoder:
    """Convert HTML fragments into LaTeX using a :class:`RuleTable`."""

    def __init__(
        self,
        rules: Iterable[RuleLike] = DEFAULT_RULES,
        *,
        parser: str = DEFAULT_PARSER,
    ) -> None:
        self.rules = RuleTable(rules)
        self.parser_backend = parser

    def transcode(self, markup: str, overrides: Iterable[RuleLike] | None = None) -> str:
        """Return the LaTeX rendition of ``markup``."""
        table = self.rules.with_overrides(overrides) if overrides else self.rules
        soup = self._parse(escape_outside_tags(markup))

        # snapshot first: replacing nodes must not disturb the elements still to visit
        elements = soup.find_all(True)
        for element in reversed(elements):
            rule = table.lookup(element.name)
            if rule is None:
                continue
            latex = rule.substitute(rule.extract_from(element))
            wrapper = soup.new_tag(WRAPPER_TAG)
            wrapper.string = latex
            element.replace_with(wrapper)

        logger.debug("transcoded %d elements with %d rules", len(elements), len(table))
        return self._collect_output(soup)

    def _parse(self, markup: str) -> BeautifulSoup:
        try:
            return BeautifulSoup(markup, self.parser_backend)
        except FeatureNotFound:
            if self.parser_backend == FALLBACK_PARSER:
                raise
            logger.warning(
                "HTML parser '%s' is unavailable, falling back to %s",
                self.parser_backend,
                FALLBACK_PARSER,
            )
            self.parser_backend = FALLBACK_PARSER
            return BeautifulSoup(markup, self.parser_backend)

    @staticmethod
    def _collect_output(soup: BeautifulSoup) -> str:
        return soup.get_text()


def transcode(markup: str, overrides: Iterable[RuleLike] | None = None) -> str:
    """Convert ``markup`` with the default rule table and optional overrides."""
    return MarkupTranscoder().transcode(markup, overrides)


__all__ = [
    "DEFAULT_PARSER",
    "TAG_PATTERN",
    "MarkupTranscoder",
    "escape_outside_tags",
    "transcode",
]
