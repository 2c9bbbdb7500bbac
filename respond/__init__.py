"""HTTP response formatting with first-match content negotiation."""

from respond.errors import (
    ConfigurationError,
    EncodeError,
    InvalidArgumentError,
    NotAcceptableError,
    NotInitializedError,
    OptionsFrozenError,
    RespondError,
    TemplateRenderError,
    TemplateSetupError,
)
from respond.options import Delims, Options, build_options, options_from_mapping
from respond.renderer import Renderer
from respond.responder import Responder
from respond.sinks import RequestMeta, ResponseSink, WerkzeugSink, as_request_meta

__all__ = [
    "ConfigurationError",
    "Delims",
    "EncodeError",
    "InvalidArgumentError",
    "NotAcceptableError",
    "NotInitializedError",
    "Options",
    "OptionsFrozenError",
    "Renderer",
    "RequestMeta",
    "RespondError",
    "Responder",
    "ResponseSink",
    "TemplateRenderError",
    "TemplateSetupError",
    "WerkzeugSink",
    "as_request_meta",
    "build_options",
    "options_from_mapping",
]
