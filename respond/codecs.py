"""JSON and XML marshalling for response bodies."""

from __future__ import annotations

import dataclasses
import json
import re
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from html import escape as html_escape
from typing import Any, Iterable, Mapping, Optional, Tuple, Type

from respond.constants import DEFAULT_XML_ROOT
from respond.errors import EncodeError

_XML_TAG_RE = re.compile(r"[^0-9A-Za-z_.-]")
_XML_INVALID_CHAR_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
)


# ============================================================================
# JSON
# ============================================================================

class ResponseJSONEncoder(json.JSONEncoder):
    """JSON encoder that also understands dataclasses, dates, sets and decimals."""

    def default(self, o: Any) -> Any:
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return dataclasses.asdict(o)
        if isinstance(o, (datetime, date, time)):
            return o.isoformat()
        if isinstance(o, (set, frozenset)):
            return list(o)
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, Enum):
            return o.value
        return super().default(o)


def marshal_json(
    value: Any,
    indent: bool = False,
    escape_html: bool = False,
    encoder: Optional[Type[json.JSONEncoder]] = None,
    encoding: str = "utf-8",
) -> bytes:
    """Encode *value* as JSON in *encoding* (UTF-8 by default).

    Args:
        value: Payload to encode
        indent: Pretty-print with two-space indentation
        escape_html: Escape ``<``, ``>`` and ``&`` as unicode escapes
        encoder: JSON encoder class, defaults to :class:`ResponseJSONEncoder`
        encoding: Charset of the returned bytes

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the payload is not JSON serializable or not
            representable in *encoding*

    Example:
        >>> marshal_json({"a": 1})
        b'{"a":1}'
    """
    options: dict[str, Any] = {
        "cls": encoder or ResponseJSONEncoder,
        "ensure_ascii": False,
        "allow_nan": False,
    }
    if indent:
        options["indent"] = 2
    else:
        options["separators"] = (",", ":")

    try:
        text = json.dumps(value, **options)
        if escape_html:
            for char, escaped in _HTML_ESCAPES:
                text = text.replace(char, escaped)
        return text.encode(encoding)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Cannot marshal {type(value).__name__} to JSON: {exc}") from exc


# ============================================================================
# XML
# ============================================================================

def marshal_xml(
    value: Any,
    indent: bool = False,
    root: str = DEFAULT_XML_ROOT,
    encoding: str = "utf-8",
) -> bytes:
    """Encode *value* as an XML document body (without declaration).

    Mappings become child elements named after their keys, sequences become
    ``<item>`` children, and dataclass instances become elements named after
    their class. With *indent* each nested element starts on its own line,
    indented by one space per level. Characters *encoding* cannot represent
    are written as character references.

    Raises:
        EncodeError: If the payload contains a value with no XML form
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        root = type(value).__name__
    document = _value_to_xml(value, _sanitize_xml_tag(root), 0, indent)
    try:
        return document.encode(encoding, errors="xmlcharrefreplace")
    except (UnicodeError, LookupError) as exc:
        raise EncodeError(f"Cannot encode XML as {encoding}: {exc}") from exc


def xml_declaration(charset: str) -> str:
    """Return the XML declaration line for *charset*."""
    return f'<?xml version="1.0" encoding="{charset}" ?>\n'


def _value_to_xml(value: Any, tag: str, depth: int, indent: bool) -> str:
    lead = "\n" + " " * depth if indent and depth else ""

    children = _xml_children(value)
    if children is not None:
        parts = [
            _value_to_xml(child, child_tag, depth + 1, indent)
            for child_tag, child in children
        ]
        if not parts:
            return f"{lead}<{tag}></{tag}>"
        close_lead = "\n" + " " * depth if indent else ""
        return f"{lead}<{tag}>{''.join(parts)}{close_lead}</{tag}>"

    if value is None:
        return f"{lead}<{tag} />"

    text = html_escape(_sanitize_xml_text(_xml_scalar(value)))
    return f"{lead}<{tag}>{text}</{tag}>"


def _xml_children(value: Any) -> Optional[Iterable[Tuple[str, Any]]]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return [(_sanitize_xml_tag(str(key)), item) for key, item in value.items()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [("item", item) for item in value]
    return None


def _xml_scalar(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    raise EncodeError(f"Cannot marshal {type(value).__name__} to XML")


def _sanitize_xml_tag(candidate: str) -> str:
    sanitized = _XML_TAG_RE.sub("_", candidate.strip())
    if not sanitized:
        return "item"
    if not (sanitized[0].isalpha() or sanitized[0] == "_"):
        sanitized = f"_{sanitized}"
    return sanitized


def _sanitize_xml_text(value: str) -> str:
    """Replace control characters that are not permitted in XML documents."""

    return _XML_INVALID_CHAR_RE.sub(
        lambda match: f"\\x{ord(match.group(0)):02x}", value
    )


__all__ = ["ResponseJSONEncoder", "marshal_json", "marshal_xml", "xml_declaration"]
