"""XML escaping and name checks.

Escaping uses ``str.translate()`` for a single O(n) pass. Text content escapes
``& < >``; attribute values additionally escape ``"`` because values are
always emitted with double quotes (so ``'`` never needs escaping).

Names follow the XML 1.0 ``Name`` production.
"""

from __future__ import annotations

import re

_TEXT_TABLE = str.maketrans({"&": "&amp;", "<": "&lt;", ">": "&gt;"})
_ATTR_TABLE = str.maketrans({"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;"})

_TEXT_SPECIAL = frozenset("&<>")
_ATTR_SPECIAL = frozenset('&<>"')


def escape_text(value: str) -> str:
    """Escape a string for use as element content.

    Example:
        >>> escape_text("Fish & <Chips>")
        'Fish &amp; &lt;Chips&gt;'
    """
    # Fast path: most values carry no markup characters
    if _TEXT_SPECIAL.isdisjoint(value):
        return value
    return value.translate(_TEXT_TABLE)


def escape_attr(value: str) -> str:
    """Escape a string for use inside a double-quoted attribute value.

    Example:
        >>> escape_attr('say "hi" & go')
        'say &quot;hi&quot; &amp; go'
    """
    if _ATTR_SPECIAL.isdisjoint(value):
        return value
    return value.translate(_ATTR_TABLE)


_NAME_START = (
    ":A-Z_a-z"
    "\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u02ff\u0370-\u037d\u037f-\u1fff"
    "\u200c-\u200d\u2070-\u218f\u2c00-\u2fef\u3001-\ud7ff\uf900-\ufdcf"
    "\ufdf0-\ufffd\U00010000-\U000effff"
)
_NAME_CHAR = _NAME_START + "\\-.0-9\u00b7\u0300-\u036f\u203f-\u2040"

NAME_RE = re.compile(f"[{_NAME_START}][{_NAME_CHAR}]*")
NAME_START_RE = re.compile(f"[{_NAME_START}]")


def is_name(value: str) -> bool:
    """Return True if ``value`` is a valid XML name.

    Example:
        >>> is_name("itunes:image")
        True
        >>> is_name("1st")
        False
    """
    return NAME_RE.fullmatch(value) is not None


_ENTITY_RE = re.compile(r"&(?:(amp|lt|gt|quot|apos)|#([0-9]+)|#x([0-9a-fA-F]+));")
_PREDEFINED = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}


def _replace_entity(match: re.Match[str]) -> str:
    named, dec, hexa = match.groups()
    if named:
        return _PREDEFINED[named]
    codepoint = int(dec) if dec else int(hexa, 16)
    if codepoint > 0x10FFFF:
        return match.group(0)
    return chr(codepoint)


def unescape(value: str) -> str:
    """Decode the predefined entities and numeric character references.

    Unknown references are left untouched and end up escaped on output.

    Example:
        >>> unescape("a &lt; b &#38; c")
        'a < b & c'
    """
    if "&" not in value:
        return value
    return _ENTITY_RE.sub(_replace_entity, value)
