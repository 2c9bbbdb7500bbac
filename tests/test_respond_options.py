"""Unit tests for responder options."""

from __future__ import annotations

import pytest

from respond import Responder
from respond.constants import DEFAULT_XML_PREFIX
from respond.errors import OptionsFrozenError
from respond.options import Delims, Options, build_options, options_from_mapping


def test_defaults_match_standard_mime_types() -> None:
    opts = Options()

    assert opts.content_binary == "application/octet-stream"
    assert opts.content_html == "text/html"
    assert opts.content_xml == "application/xml"
    assert opts.content_text == "text/plain"
    assert opts.content_json == "application/json"
    assert opts.content_jsonp == "application/javascript"
    assert opts.charset == "UTF-8"
    assert opts.add_charset is True
    assert opts.xml_prefix == DEFAULT_XML_PREFIX
    assert opts.tpl_delims == Delims("{{", "}}")
    assert tuple(opts.tpl_suffixes) == ("tpl", "html")
    assert opts.auto_template is None


def test_build_options_applies_mutators_in_order() -> None:
    def first(opts: Options) -> None:
        opts.json_prefix = "first"

    def second(opts: Options) -> None:
        opts.json_prefix += "+second"

    assert build_options(first, second).json_prefix == "first+second"


def test_mutator_failure_propagates() -> None:
    def broken(opts: Options) -> None:
        raise RuntimeError("bad option")

    with pytest.raises(RuntimeError, match="bad option"):
        build_options(broken)


def test_append_charset_only_once() -> None:
    opts = Options()
    opts.append_charset()
    opts.append_charset()

    for content_type in opts.content_types().values():
        assert content_type.endswith("; UTF-8")
        assert content_type.count("UTF-8") == 1


def test_freeze_rejects_assignment() -> None:
    opts = Options(tpl_func_map={"upper": str.upper}, tpl_suffixes=["html"])
    opts.freeze()

    with pytest.raises(OptionsFrozenError):
        opts.json_indent = True
    with pytest.raises(TypeError):
        opts.tpl_func_map["lower"] = str.lower  # type: ignore[index]
    assert opts.tpl_suffixes == ("html",)


def test_snapshot_is_unfrozen_copy() -> None:
    opts = Options()
    opts.append_charset()
    opts.freeze()

    copy = opts.snapshot()
    copy.json_indent = True
    copy.append_charset()

    assert opts.json_indent is False
    assert copy.content_json == "application/json; UTF-8"


def test_options_from_mapping_reads_prefixed_keys(caplog) -> None:
    config = {
        "RESPOND_JSON_INDENT": True,
        "RESPOND_CHARSET": "ISO-8859-1",
        "RESPOND_TPL_DELIMS": ["[[", "]]"],
        "RESPOND_NOT_AN_OPTION": 1,
        "SECRET_KEY": "ignored",
    }

    opts = build_options(options_from_mapping(config))

    assert opts.json_indent is True
    assert opts.charset == "ISO-8859-1"
    assert opts.tpl_delims == Delims("[[", "]]")
    assert "RESPOND_NOT_AN_OPTION" in caplog.text


def test_responder_options_are_frozen_after_initialize() -> None:
    responder = Responder()
    responder.configure(lambda opts: setattr(opts, "json_indent", True))
    responder.initialize()

    assert responder.options.json_indent is True
    with pytest.raises(OptionsFrozenError):
        responder.configure(lambda opts: setattr(opts, "json_indent", False))


def test_initialize_appends_charset_once() -> None:
    responder = Responder()
    responder.initialize()
    responder.initialize()

    for content_type in responder.options.content_types().values():
        assert content_type.count("; UTF-8") == 1


def test_add_charset_disabled_keeps_plain_types() -> None:
    responder = Responder.new_initialized(lambda opts: setattr(opts, "add_charset", False))

    assert responder.options.content_json == "application/json"


def test_default_instance_is_shared_until_reset(fresh_default) -> None:
    first = Responder.default()
    assert Responder.default() is first

    Responder.initialize_default(lambda opts: setattr(opts, "xml_indent", True))
    assert first.initialized
    assert first.options.xml_indent is True

    Responder.reset_default()
    assert Responder.default() is not first
