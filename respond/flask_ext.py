"""Flask integration for the responder.

``init_app`` builds a responder from ``RESPOND_*`` keys in ``app.config``,
initializes it and stores it on the app, so views receive it from the app
rather than from module globals::

    app = Flask(__name__)
    app.config["RESPOND_JSON_INDENT"] = True
    init_app(app)

    @app.route("/status")
    def status():
        responder = get_responder()
        return build_response(lambda sink: responder.json(sink, 200, {"ok": True}))
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional

from flask import Flask, Response, current_app, request

from respond.constants import CONFIG_PREFIX, FORMAT_JSON
from respond.errors import NotAcceptableError
from respond.options import Options, options_from_mapping
from respond.responder import Responder
from respond.sinks import WerkzeugSink

logger = logging.getLogger(__name__)

EXTENSION_KEY = "respond"


def init_app(app: Flask, responder: Optional[Responder] = None) -> Responder:
    """Attach an initialized responder to *app*.

    Args:
        app: Flask application
        responder: Responder to use; built from ``app.config`` when omitted

    Returns:
        The initialized responder

    Raises:
        TemplateSetupError: If the configured templates cannot be loaded
    """
    if responder is None:
        responder = Responder(
            options_from_mapping(app.config, CONFIG_PREFIX),
            _default_views_dir(app),
        )

    responder.initialize()
    app.extensions[EXTENSION_KEY] = responder
    logger.info("Responder attached to %s", app.name)
    return responder


def _default_views_dir(app: Flask) -> Callable[[Options], None]:
    """Use the app's template folder when no views directory is configured."""

    def apply(options: Options) -> None:
        if options.tpl_views_dir or not app.template_folder:
            return
        folder = os.path.join(app.root_path, app.template_folder)
        if os.path.isdir(folder):
            options.tpl_views_dir = folder

    return apply


def get_responder(app: Optional[Flask] = None) -> Responder:
    """Return the responder attached to *app* (default: the current app)."""
    app = app or current_app
    try:
        return app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("Responder not configured; call init_app(app) first") from None


def build_response(write: Callable[[WerkzeugSink], Any]) -> Response:
    """Run *write* against a fresh sink and return the collected response."""
    sink = WerkzeugSink(response_class=Response)
    write(sink)
    return sink.response


def negotiate(data: Any, default_format: Optional[str] = FORMAT_JSON) -> Response:
    """Reply to the current request in the format its ``Accept`` header asks for.

    A request without an ``Accept`` header gets *default_format*; pass None
    to answer it with ``406`` instead. A request whose first media type is
    unsupported gets ``406 Not Acceptable``.
    """
    responder = get_responder()
    sink = WerkzeugSink(response_class=Response)

    header = request.headers.get(responder.options.accept_header, "").strip()
    if not header and default_format is not None:
        logger.debug("No Accept header; replying with %s", default_format)
        responder.write_format(sink, default_format, data)
        return sink.response

    try:
        fmt = responder.auto(sink, request, data)
    except NotAcceptableError as exc:
        logger.info("Not acceptable: %s", exc)
        fmt = None

    if fmt is None and not sink.committed:
        responder.text(sink, NotAcceptableError.status_code, "Not Acceptable")
    return sink.response


__all__ = ["init_app", "get_responder", "build_response", "negotiate"]
