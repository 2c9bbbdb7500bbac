"""Configuration options for the responder.

Options are a plain dataclass built from defaults and then adjusted by
caller-supplied mutator functions, applied in order::

    def pretty(opts):
        opts.json_indent = True

    options = build_options(pretty)

Once a responder has been initialized its options are frozen and any further
assignment raises :class:`~respond.errors.OptionsFrozenError`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Sequence, Type

from respond.constants import (
    CONFIG_PREFIX,
    CONTENT_BINARY,
    CONTENT_HTML,
    CONTENT_JSON,
    CONTENT_JSONP,
    CONTENT_TEXT,
    CONTENT_TYPE_FIELDS,
    CONTENT_XML,
    DEFAULT_CHARSET,
    DEFAULT_DELIMS,
    DEFAULT_TPL_SUFFIXES,
    DEFAULT_XML_PREFIX,
    DEFAULT_XML_ROOT,
    HEADER_ACCEPT,
)
from respond.errors import OptionsFrozenError

logger = logging.getLogger(__name__)


class Delims(NamedTuple):
    """Left and right template delimiters."""

    left: str = DEFAULT_DELIMS[0]
    right: str = DEFAULT_DELIMS[1]


@dataclass
class Options:
    """Formatting options owned by a single responder."""

    debug: bool = False

    json_indent: bool = False
    json_prefix: str = ''
    json_escape_html: bool = False
    json_encoder: Optional[Type[json.JSONEncoder]] = None

    xml_indent: bool = False
    xml_prefix: str = DEFAULT_XML_PREFIX
    xml_root: str = DEFAULT_XML_ROOT

    # template rendering
    tpl_layout: Optional[str] = None
    tpl_delims: Delims = field(default_factory=Delims)
    tpl_func_map: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    tpl_views_dir: str = ''
    tpl_suffixes: Sequence[str] = DEFAULT_TPL_SUFFIXES

    # content types per output format
    content_binary: str = CONTENT_BINARY
    content_html: str = CONTENT_HTML
    content_xml: str = CONTENT_XML
    content_text: str = CONTENT_TEXT
    content_json: str = CONTENT_JSON
    content_jsonp: str = CONTENT_JSONP

    charset: str = DEFAULT_CHARSET
    add_charset: bool = True

    # negotiation
    auto_template: Optional[str] = None
    strict_accept: bool = False
    accept_header: str = HEADER_ACCEPT

    _charset_appended: bool = field(default=False, init=False, repr=False, compare=False)
    _frozen: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get('_frozen'):
            raise OptionsFrozenError(
                f"Cannot set option {name!r}: options are frozen after initialization"
            )
        object.__setattr__(self, name, value)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def append_charset(self) -> None:
        """Suffix every content type with ``"; <charset>"``, at most once."""
        if self._charset_appended:
            return

        for attr in CONTENT_TYPE_FIELDS.values():
            setattr(self, attr, f"{getattr(self, attr)}; {self.charset}")
        self._charset_appended = True

    def freeze(self) -> None:
        """Make the options read-only."""
        if self._frozen:
            return

        self.tpl_delims = Delims(*self.tpl_delims)
        self.tpl_func_map = MappingProxyType(dict(self.tpl_func_map or {}))
        self.tpl_suffixes = tuple(self.tpl_suffixes or ())
        self._frozen = True

    def snapshot(self) -> "Options":
        """Return an unfrozen copy, safe to inspect or modify."""
        copy = replace(self, tpl_func_map=dict(self.tpl_func_map))
        object.__setattr__(copy, '_charset_appended', self._charset_appended)
        return copy

    def content_types(self) -> Dict[str, str]:
        """Map each output format to its configured content type."""
        return {fmt: getattr(self, attr) for fmt, attr in CONTENT_TYPE_FIELDS.items()}


OptionsMutator = Callable[[Options], Any]

_OPTION_NAMES = frozenset(f.name for f in fields(Options) if f.init)


def build_options(*mutators: OptionsMutator) -> Options:
    """Create options with defaults, then apply *mutators* in order."""
    options = Options()
    for mutator in mutators:
        mutator(options)
    return options


def options_from_mapping(
    mapping: Mapping[str, Any], prefix: str = CONFIG_PREFIX
) -> OptionsMutator:
    """Return a mutator copying ``<prefix><OPTION>`` keys from *mapping*.

    Args:
        mapping: Flask ``app.config`` or any mapping with upper-case keys
        prefix: Key prefix marking responder settings

    Returns:
        Callable applying the matching values to an :class:`Options`

    Example:
        >>> opts = build_options(options_from_mapping({'RESPOND_JSON_INDENT': True}))
        >>> opts.json_indent
        True
    """

    def apply(options: Options) -> None:
        for key, value in mapping.items():
            if not isinstance(key, str) or not key.startswith(prefix):
                continue
            name = key[len(prefix):].lower()
            if name not in _OPTION_NAMES:
                logger.warning("Ignoring unknown responder option %s", key)
                continue
            if name == 'tpl_delims':
                value = Delims(*value)
            setattr(options, name, value)

    return apply


__all__ = [
    "Delims",
    "Options",
    "OptionsMutator",
    "build_options",
    "options_from_mapping",
]
