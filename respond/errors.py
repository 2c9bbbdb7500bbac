"""Exceptions raised by the responder."""


class RespondError(Exception):
    """Base class for all responder errors."""


class InvalidArgumentError(RespondError, ValueError):
    """Raised when a caller passes an unusable argument (e.g. empty JSONP callback)."""


class OptionsFrozenError(RespondError):
    """Raised when options are changed after the responder was initialized."""


class NotInitializedError(RespondError):
    """Raised when a formatting method is used before ``initialize()``."""


class ConfigurationError(RespondError):
    """Raised when the responder configuration cannot serve a request."""


class TemplateSetupError(ConfigurationError):
    """Raised when templates cannot be loaded at startup.

    This is a startup failure: an application seeing it should not go on to
    serve requests.
    """


class TemplateRenderError(RespondError):
    """Raised when a template cannot be found, parsed or executed."""


class EncodeError(RespondError):
    """Raised when a payload cannot be marshalled to JSON or XML."""


class NotAcceptableError(RespondError):
    """Raised by strict negotiation when no supported format was requested."""

    status_code = 406

    def __init__(self, accept: str):
        super().__init__(f"No supported format for Accept: {accept!r}")
        self.accept = accept
