"""Transcode rules mapping HTML tags onto LaTeX templates.

A :class:`TranscodeRule` says how one element is rewritten: which value is
pulled out of the element (its text content or one of its attributes) and the
LaTeX template receiving that value at the ``$1`` placeholder.

Rules live in a :class:`RuleTable`, an ordered mapping keyed by tag. Tags are
unique in the table. Overriding a tag that already exists swaps the rule in
place, keeping its position; unknown tags are appended at the end.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:  # pragma: no cover - typing only
    from bs4.element import Tag


PLACEHOLDER = "$1"


class Extract(Enum):
    """Kind of value extracted from a matched element."""

    VALUE = "value"
    """Full text content of the element, descendants included."""

    ATTRIBUTE = "attribute"
    """Value of a named attribute, empty when the attribute is absent."""


@dataclass(frozen=True, slots=True)
class TranscodeRule:
    """Rewrite rule for a single tag."""

    tag: str
    template: str
    extract: Extract = Extract.VALUE
    attribute: str | None = None

    def __post_init__(self) -> None:
        # parsers report element names in lower case
        object.__setattr__(self, "tag", self.tag.strip().lower())
        if self.extract is Extract.ATTRIBUTE and not self.attribute:
            msg = f"Rule for <{self.tag}> extracts an attribute but names none."
            raise ValueError(msg)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> TranscodeRule:
        """Build a rule from ``{"tag", "extract", "replace"}`` style mappings.

        ``extract`` is either ``"value"`` (text content) or the name of the
        attribute to read. ``template`` is accepted as an alias of ``replace``.
        """
        try:
            tag = str(payload["tag"]).strip().lower()
        except KeyError as exc:
            raise ValueError("Transcode rule is missing its 'tag'.") from exc
        template = payload.get("replace", payload.get("template"))
        if template is None:
            raise ValueError(f"Transcode rule for <{tag}> is missing its template.")
        extract = str(payload.get("extract") or Extract.VALUE.value)
        if extract == Extract.VALUE.value:
            return cls(tag=tag, template=str(template))
        return cls(
            tag=tag,
            template=str(template),
            extract=Extract.ATTRIBUTE,
            attribute=extract,
        )

    def extract_from(self, element: Tag) -> str:
        """Return the value this rule substitutes for ``element``."""
        if self.extract is Extract.VALUE:
            return element.get_text()
        value = element.get(self.attribute or "")
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        # multi-valued attributes such as class come back as lists
        return " ".join(str(item) for item in value)

    def substitute(self, value: str) -> str:
        """Return the template with the placeholder replaced by ``value``."""
        return self.template.replace(PLACEHOLDER, value)


def _value(tag: str, template: str) -> TranscodeRule:
    return TranscodeRule(tag=tag, template=template)


DEFAULT_RULES: tuple[TranscodeRule, ...] = (
    _value("p", "$1 \\newline "),
    _value("b", "\\textbf{$1}"),
    _value("strong", "\\textbf{$1}"),
    _value("i", "\\textit{$1}"),
    _value("em", "\\textit{$1}"),
    _value("u", "\\underline{$1}"),
    _value("ins", "\\underline{$1}"),
    _value("br", "\\newline "),
    _value("sup", "\\textsuperscript{$1}"),
    _value("sub", "\\textsubscript{$1}"),
    _value("h1", "\\section{$1}"),
    _value("h2", "\\subsection{$1}"),
    _value("h3", "\\subsubsection{$1}"),
    _value("h4", "\\paragraph{$1} \\mbox{} \\\\"),
    _value("h5", "\\subparagraph{$1} \\mbox{} \\\\"),
    _value("h6", "\\subparagraph{$1} \\mbox{} \\\\"),
    _value("li", "\\item $1"),
    _value("ul", "\\begin{itemize}$1\\end{itemize}"),
    _value("ol", "\\begin{enumerate}$1\\end{enumerate}"),
    TranscodeRule(
        tag="img",
        template="\\includegraphics[scale=1]{$1}",
        extract=Extract.ATTRIBUTE,
        attribute="src",
    ),
)


RuleLike = TranscodeRule | Mapping[str, Any]


def coerce_rule(rule: RuleLike) -> TranscodeRule:
    """Return ``rule`` as a :class:`TranscodeRule`."""
    if isinstance(rule, TranscodeRule):
        return rule
    if isinstance(rule, Mapping):
        return TranscodeRule.from_mapping(rule)
    msg = f"Unsupported transcode rule: {rule!r}"
    raise TypeError(msg)


class RuleTable:
    """Ordered, tag-unique collection of transcode rules."""

    def __init__(self, rules: Iterable[RuleLike] = DEFAULT_RULES) -> None:
        self._rules: dict[str, TranscodeRule] = {}
        for rule in rules:
            candidate = coerce_rule(rule)
            # first declaration of a tag wins
            self._rules.setdefault(candidate.tag, candidate)

    def apply_overrides(self, overrides: Iterable[RuleLike] | None) -> RuleTable:
        """Replace rules by tag in place or append new ones; returns ``self``."""
        for rule in overrides or ():
            candidate = coerce_rule(rule)
            self._rules[candidate.tag] = candidate
        return self

    def with_overrides(self, overrides: Iterable[RuleLike] | None) -> RuleTable:
        """Return a copy of the table with ``overrides`` applied."""
        return RuleTable(self._rules.values()).apply_overrides(overrides)

    def lookup(self, tag: str) -> TranscodeRule | None:
        return self._rules.get(tag)

    def tags(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def describe(self) -> list[dict[str, object]]:
        """Return a serialisable snapshot of the table."""
        return [
            {
                "order": order,
                "tag": rule.tag,
                "extract": rule.extract.value,
                "attribute": rule.attribute,
                "template": rule.template,
            }
            for order, rule in enumerate(self._rules.values())
        ]

    def __contains__(self, tag: object) -> bool:
        return tag in self._rules

    def __iter__(self) -> Iterator[TranscodeRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)


__all__ = [
    "DEFAULT_RULES",
    "PLACEHOLDER",
    "Extract",
    "RuleLike",
    "RuleTable",
    "TranscodeRule",
    "coerce_rule",
]
