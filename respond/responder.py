"""Format values as HTTP replies.

A :class:`Responder` writes JSON, JSONP, XML, text, HTML or binary bodies to a
response sink, together with the matching status and headers::

    responder = Responder(lambda opts: setattr(opts, 'json_indent', True))
    responder.initialize()

    responder.json(sink, 200, {"name": "viewer"})

Every formatting method sets its headers first, then writes the status, then
the body. Bodies are encoded in the configured charset before the status is
written, so an encode error leaves the sink untouched. Named templates render
after the status; a render error there leaves a committed status and an empty
body behind.
"""

from __future__ import annotations

import codecs
import logging
from typing import Any, BinaryIO, Optional, Union

from respond.codecs import marshal_json, marshal_xml, xml_declaration
from respond.constants import (
    DEFAULT_XML_PREFIX,
    DISPOSITION_ATTACHMENT,
    DISPOSITION_INLINE,
    FORMAT_HTML,
    FORMAT_JSON,
    FORMAT_TEXT,
    FORMAT_XML,
    HEADER_CONTENT_DISPOSITION,
    HEADER_CONTENT_TYPE,
)
from respond.errors import (
    ConfigurationError,
    EncodeError,
    InvalidArgumentError,
    NotAcceptableError,
    NotInitializedError,
    OptionsFrozenError,
)
from respond.negotiation import parse_accept, select_format
from respond.options import Options, OptionsMutator, build_options
from respond.renderer import Renderer
from respond.sinks import ResponseSink, as_request_meta

logger = logging.getLogger(__name__)

STATUS_NO_CONTENT = 204

Body = Union[bytes, bytearray, str]


class Responder:
    """Write formatted replies to response sinks.

    The responder is configured with option mutators, then initialized once.
    Initialization appends the charset to the content types, sets up the
    template renderer and freezes the options. After that the instance holds
    no per-request state and can be shared between request handlers.
    """

    _default: Optional["Responder"] = None

    def __init__(self, *mutators: OptionsMutator):
        self._options: Options = build_options(*mutators)
        self._renderer: Optional[Renderer] = None
        self._encoding = 'utf-8'
        self.initialized = False

    # ------------------------------------------------------------------
    # construction and initialization
    # ------------------------------------------------------------------

    @classmethod
    def new_initialized(cls, *mutators: OptionsMutator) -> "Responder":
        """Create a responder and initialize it."""
        return cls(*mutators).initialize()

    @classmethod
    def default(cls) -> "Responder":
        """Get the shared default responder, creating it if needed."""
        if cls._default is None:
            cls._default = cls()
        return cls._default

    @classmethod
    def initialize_default(cls, *mutators: OptionsMutator) -> "Responder":
        """Configure and initialize the shared default responder."""
        return cls.default().configure(*mutators).initialize()

    @classmethod
    def reset_default(cls) -> None:
        """Drop the shared default responder (useful for testing)."""
        cls._default = None

    def configure(self, *mutators: OptionsMutator) -> "Responder":
        """Apply more option mutators before initialization.

        Raises:
            OptionsFrozenError: If the responder is already initialized
        """
        if self.initialized:
            raise OptionsFrozenError("Responder is initialized; options can no longer change")
        for mutator in mutators:
            mutator(self._options)
        return self

    def initialize(self) -> "Responder":
        """Finish configuration. Calling it again does nothing.

        Raises:
            TemplateSetupError: If templates cannot be loaded. Treat this as
                a startup failure.
        """
        if self.initialized:
            return self

        opts = self._options
        if opts.add_charset:
            opts.append_charset()

        self._encoding = _python_encoding(opts.charset)
        if opts.xml_prefix == DEFAULT_XML_PREFIX:
            opts.xml_prefix = xml_declaration(opts.charset)

        renderer = Renderer(
            views_dir=opts.tpl_views_dir,
            suffixes=opts.tpl_suffixes,
            delims=opts.tpl_delims,
            layout=opts.tpl_layout,
            func_map=opts.tpl_func_map,
            debug=opts.debug,
            encoding=self._encoding,
        )
        renderer.initialize()

        opts.freeze()
        self._renderer = renderer
        self.initialized = True
        logger.info(
            "Responder initialized (charset=%s, views=%s)",
            opts.charset,
            opts.tpl_views_dir or "-",
        )
        return self

    @property
    def options(self) -> Options:
        """A copy of the current options."""
        return self._options.snapshot()

    @property
    def renderer(self) -> Renderer:
        self._require_initialized()
        return self._renderer

    def load_template_glob(self, pattern: str) -> None:
        """Load templates by glob, e.g. ``views/*`` or ``views/**/*``."""
        self.renderer.load_glob(pattern)

    def load_template_files(self, *paths: str) -> None:
        self.renderer.load_files(*paths)

    # ------------------------------------------------------------------
    # raw content
    # ------------------------------------------------------------------

    def data(
        self,
        sink: ResponseSink,
        status: int,
        body: Body,
        content_type: Optional[str] = None,
    ) -> None:
        """Write *body* with *status*, setting the content type if given.

        Text, raw HTML and explicit-content replies are written through here.
        The body is encoded before the status is written.

        Raises:
            InvalidArgumentError: If *body* is not bytes or text
            EncodeError: If text cannot be encoded in the configured charset
        """
        self._require_initialized()
        payload = self._encode(body)
        if content_type:
            sink.set_header(HEADER_CONTENT_TYPE, content_type)
        sink.write_status(status)
        sink.write(payload)

    def content(self, sink: ResponseSink, status: int, body: Body, content_type: str) -> None:
        """Write *body* with a caller-chosen content type, used as given."""
        self.data(sink, status, body, content_type)

    def no_content(self, sink: ResponseSink) -> None:
        """Reply ``204 No Content`` without a body."""
        self._require_initialized()
        sink.write_status(STATUS_NO_CONTENT)

    def empty(self, sink: ResponseSink) -> None:
        """Alias of :meth:`no_content`."""
        self.no_content(sink)

    def text(self, sink: ResponseSink, status: int, body: Body) -> None:
        self.data(sink, status, body, self._options.content_text)

    def string(self, sink: ResponseSink, status: int, body: Body) -> None:
        """Alias of :meth:`text`."""
        self.text(sink, status, body)

    # ------------------------------------------------------------------
    # structured data
    # ------------------------------------------------------------------

    def json(self, sink: ResponseSink, status: int, value: Any) -> None:
        """Write *value* as JSON, preceded by the configured JSON prefix.

        Raises:
            EncodeError: If *value* is not JSON serializable
        """
        self._require_initialized()
        opts = self._options
        body = marshal_json(
            value,
            indent=opts.json_indent,
            escape_html=opts.json_escape_html,
            encoder=opts.json_encoder,
            encoding=self._encoding,
        )
        prefix = self._encode(opts.json_prefix)

        sink.set_header(HEADER_CONTENT_TYPE, opts.content_json)
        sink.write_status(status)
        if prefix:
            sink.write(prefix)
        sink.write(body)

    def jsonp(self, sink: ResponseSink, status: int, callback: str, value: Any) -> None:
        """Write *value* as ``callback(<json>);``.

        Raises:
            InvalidArgumentError: If *callback* is empty; nothing is written
            EncodeError: If *value* is not JSON serializable
        """
        self._require_initialized()
        if not callback:
            raise InvalidArgumentError("JSONP callback cannot be empty")

        opts = self._options
        body = marshal_json(
            value,
            escape_html=opts.json_escape_html,
            encoder=opts.json_encoder,
            encoding=self._encoding,
        )
        payload = self._encode(f"{callback}(") + body + self._encode(");")

        sink.set_header(HEADER_CONTENT_TYPE, opts.content_jsonp)
        sink.write_status(status)
        sink.write(payload)

    def xml(self, sink: ResponseSink, status: int, value: Any) -> None:
        """Write *value* as XML, preceded by the configured XML prefix.

        Raises:
            EncodeError: If *value* contains something with no XML form
        """
        self._require_initialized()
        opts = self._options
        body = marshal_xml(
            value,
            indent=opts.xml_indent,
            root=opts.xml_root,
            encoding=self._encoding,
        )
        prefix = self._encode(opts.xml_prefix)

        sink.set_header(HEADER_CONTENT_TYPE, opts.content_xml)
        sink.write_status(status)
        if prefix:
            sink.write(prefix)
        sink.write(body)

    def binary(
        self,
        sink: ResponseSink,
        status: int,
        stream: Union[BinaryIO, bytes, bytearray],
        out_name: str,
        inline: bool = False,
    ) -> None:
        """Send a file-like payload as a download or inline attachment.

        The whole stream is read into memory before anything is written.

        Usage:
            with open("README.md", "rb") as handle:
                responder.binary(sink, 200, handle, "readme.md", inline=True)
        """
        self._require_initialized()
        if isinstance(stream, (bytes, bytearray)):
            payload = bytes(stream)
        else:
            payload = stream.read()

        disposition = DISPOSITION_INLINE if inline else DISPOSITION_ATTACHMENT
        sink.set_header(HEADER_CONTENT_TYPE, self._options.content_binary)
        sink.set_header(HEADER_CONTENT_DISPOSITION, f"{disposition}; filename={out_name}")
        sink.write_status(status)
        sink.write(payload)

    # ------------------------------------------------------------------
    # HTML
    # ------------------------------------------------------------------

    def html(self, sink: ResponseSink, status: int, template: str, value: Any = None, *layout: str) -> None:
        """Render the named template, optionally inside another layout.

        Raises:
            TemplateRenderError: If the template is unknown or fails to render
        """
        renderer = self.renderer
        sink.set_header(HEADER_CONTENT_TYPE, self._options.content_html)
        sink.write_status(status)
        renderer.render(sink, template, value, *layout)

    def html_string(self, sink: ResponseSink, status: int, source: str, value: Any = None) -> None:
        """Render an inline template string.

        The template is compiled and rendered before anything is written, so
        a parse or execution error leaves the sink untouched. Characters the
        charset cannot represent become HTML character references.

        Raises:
            TemplateRenderError: If the template cannot be parsed or executed
        """
        renderer = self.renderer
        template = renderer.compile_string(source)
        body = self._encode(renderer.execute(template, value), errors='xmlcharrefreplace')

        sink.set_header(HEADER_CONTENT_TYPE, self._options.content_html)
        sink.write_status(status)
        sink.write(body)

    def html_text(self, sink: ResponseSink, status: int, html: Body) -> None:
        """Write *html* verbatim as an HTML reply."""
        self.data(sink, status, html, self._options.content_html)

    # ------------------------------------------------------------------
    # negotiation
    # ------------------------------------------------------------------

    def auto(self, sink: ResponseSink, request: Any, value: Any) -> Optional[str]:
        """Reply in the format named first in the request's ``Accept`` header.

        ``application/json``, ``application/xml``, ``text/html`` (rendered
        with the ``auto_template`` option) and ``text/plain`` (``str(value)``)
        are understood. An absent header or an unsupported first media type
        writes nothing, unless ``strict_accept`` is set.

        Returns:
            The format written, or None when nothing was written

        Raises:
            ConfigurationError: If HTML was selected and no template is set
            NotAcceptableError: If ``strict_accept`` is set and the first
                media type is unsupported
        """
        self._require_initialized()
        opts = self._options
        header = as_request_meta(request).get_header(opts.accept_header)
        if not header:
            logger.debug("No %s header; nothing written", opts.accept_header)
            return None

        fmt = select_format(header)
        if fmt is None:
            tokens = parse_accept(header)
            if opts.strict_accept:
                raise NotAcceptableError(header)
            logger.warning(
                "Unsupported media type %s requested; nothing written",
                tokens[0] if tokens else header,
            )
            return None

        logger.debug("Negotiated %s from %s", fmt, header)
        self.write_format(sink, fmt, value)
        return fmt

    def write_format(self, sink: ResponseSink, fmt: str, value: Any, status: int = 200) -> None:
        """Write *value* in one of the negotiable formats.

        Raises:
            InvalidArgumentError: If *fmt* is not a negotiable format
            ConfigurationError: If *fmt* is HTML and no template is set
        """
        opts = self._options
        if fmt == FORMAT_JSON:
            self.json(sink, status, value)
        elif fmt == FORMAT_XML:
            self.xml(sink, status, value)
        elif fmt == FORMAT_HTML:
            if not opts.auto_template:
                raise ConfigurationError("HTML was negotiated but auto_template is not set")
            self.html(sink, status, opts.auto_template, value)
        elif fmt == FORMAT_TEXT:
            self.text(sink, status, str(value))
        else:
            raise InvalidArgumentError(f"Unknown response format: {fmt}")

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise NotInitializedError("Responder.initialize() must be called before use")

    def _encode(self, body: Body, errors: str = 'strict') -> bytes:
        if isinstance(body, str):
            try:
                return body.encode(self._encoding, errors)
            except UnicodeEncodeError as exc:
                raise EncodeError(f"Cannot encode body as {self._encoding}: {exc}") from exc
        if isinstance(body, (bytes, bytearray, memoryview)):
            return bytes(body)
        raise InvalidArgumentError(
            f"Body must be bytes or str, not {type(body).__name__}"
        )


def _python_encoding(charset: str) -> str:
    """Return the Python codec for *charset*, falling back to UTF-8."""
    try:
        return codecs.lookup(charset).name
    except LookupError:
        logger.warning("Unknown charset %s; encoding bodies as UTF-8", charset)
        return 'utf-8'


__all__ = ["Responder"]
