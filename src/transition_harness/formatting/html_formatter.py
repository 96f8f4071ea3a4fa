"""
Markup pretty-printer for transition snapshots.

Formats serialized markup into one tag per line, two spaces of indentation
per nesting level and one attribute per line with double quotes. Whitespace
between tags is immaterial, so markup that only differs in serialization
formats identically and diffs cleanly.

Example::

    >>> print(format_html('<div class="enter enter-from" scoped><span>Hello!</span></div>'))
    <div
      class="enter enter-from"
      scoped
    >
      <span>
        Hello!
      </span>
    </div>
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

INDENTATION = "  "

_TOKEN_PATTERN = re.compile(r"</?[^>]+>|[^<>]+")
_TAG_NAME_PATTERN = re.compile(r"^<[\w:-]+")
_ATTRIBUTE_PATTERN = re.compile(r"""([^\s="'/>]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?""")

# Elements that never have a closing tag
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)


class HTMLTokenType(Enum):
    """Kinds of markup tokens."""

    OPEN_TAG = "open_tag"
    CLOSE_TAG = "close_tag"
    SELF_CLOSING_TAG = "self_closing_tag"
    TEXT = "text"


@dataclass(frozen=True)
class HTMLToken:
    """A trimmed piece of markup."""

    content: str
    type: HTMLTokenType


def _is_self_closing(content: str) -> bool:
    if content.endswith("/>") or content.startswith("<!") or content.startswith("<?"):
        return True
    tag_name = _TAG_NAME_PATTERN.match(content)
    return tag_name is not None and tag_name.group(0)[1:].lower() in VOID_ELEMENTS


# First matching rule wins
_TOKEN_RULES: list[tuple[Callable[[str], bool], HTMLTokenType]] = [
    (lambda content: content.startswith("</"), HTMLTokenType.CLOSE_TAG),
    (_is_self_closing, HTMLTokenType.SELF_CLOSING_TAG),
    (lambda content: content.startswith("<"), HTMLTokenType.OPEN_TAG),
    (lambda content: True, HTMLTokenType.TEXT),
]


def tokenize_html(html: str) -> list[HTMLToken]:
    """Split markup into tags and text, dropping whitespace-only text."""
    tokens = []
    for match in _TOKEN_PATTERN.finditer(html):
        content = match.group(0).strip()
        if content:
            tokens.append(_create_token(content))
    return tokens


def _create_token(content: str) -> HTMLToken:
    token_type = next(token_type for rule, token_type in _TOKEN_RULES if rule(content))
    return HTMLToken(content=content, type=token_type)


def tokenize_attributes(attributes: str) -> list[str]:
    """Normalize attributes to ``name="value"`` (or a bare ``name`` when empty)."""
    tokens = []
    for match in _ATTRIBUTE_PATTERN.finditer(attributes):
        name = match.group(1)
        value = next((group for group in match.groups()[1:] if group), "")
        tokens.append(f'{name}="{value}"' if value else name)
    return tokens


def _format_open_tag(token: HTMLToken, depth: int) -> str:
    tag_name_match = _TAG_NAME_PATTERN.match(token.content)
    tag_name = tag_name_match.group(0) if tag_name_match else token.content[:-1]
    attributes = token.content[len(tag_name) : -1].strip()
    formatted_attributes = ""
    if attributes:
        indentation = INDENTATION * (depth + 1)
        lines = [f"{indentation}{attribute}" for attribute in tokenize_attributes(attributes)]
        formatted_attributes = "\n" + "\n".join(lines) + "\n" + INDENTATION * depth
    return f"{INDENTATION * depth}{tag_name}{formatted_attributes}>\n"


def _format_simple_token(token: HTMLToken, depth: int) -> str:
    return f"{INDENTATION * depth}{token.content}\n"


_FORMAT_STRATEGIES: dict[HTMLTokenType, Callable[[HTMLToken, int], str]] = {
    HTMLTokenType.OPEN_TAG: _format_open_tag,
    HTMLTokenType.CLOSE_TAG: _format_simple_token,
    HTMLTokenType.SELF_CLOSING_TAG: _format_simple_token,
    HTMLTokenType.TEXT: _format_simple_token,
}


def format_html(html: str) -> str:
    """Pretty-print markup into its canonical, indentation-normalized form."""
    formatted: list[str] = []
    depth = 0

    for token in tokenize_html(html):
        if token.type is HTMLTokenType.CLOSE_TAG:
            depth = max(depth - 1, 0)

        formatted.append(_FORMAT_STRATEGIES[token.type](token, depth))

        if token.type is HTMLTokenType.OPEN_TAG:
            depth += 1

    return "".join(formatted).strip()
