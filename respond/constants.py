"""Header names, MIME defaults and format keys shared by the responder."""

from typing import Dict, Mapping, Tuple


# ============================================================================
# HEADER NAMES
# ============================================================================

HEADER_CONTENT_TYPE = 'Content-Type'
HEADER_CONTENT_DISPOSITION = 'Content-Disposition'
HEADER_ACCEPT = 'Accept'


# ============================================================================
# CONTENT TYPES
# ============================================================================

CONTENT_BINARY = 'application/octet-stream'
CONTENT_HTML = 'text/html'
CONTENT_XML = 'application/xml'
CONTENT_TEXT = 'text/plain'
CONTENT_JSON = 'application/json'
CONTENT_JSONP = 'application/javascript'

DISPOSITION_INLINE = 'inline'
DISPOSITION_ATTACHMENT = 'attachment'


# ============================================================================
# DEFAULTS
# ============================================================================

DEFAULT_CHARSET = 'UTF-8'
DEFAULT_XML_PREFIX = '<?xml version="1.0" encoding="UTF-8" ?>\n'
DEFAULT_XML_ROOT = 'response'
DEFAULT_DELIMS: Tuple[str, str] = ('{{', '}}')
DEFAULT_TPL_SUFFIXES: Tuple[str, ...] = ('tpl', 'html')

# Prefix of Flask config keys read by ``options_from_mapping``
CONFIG_PREFIX = 'RESPOND_'


# ============================================================================
# NEGOTIATION
# ============================================================================

FORMAT_JSON = 'json'
FORMAT_XML = 'xml'
FORMAT_HTML = 'html'
FORMAT_TEXT = 'text'

# Media types ``auto`` understands, mapped to the format they select
ACCEPT_FORMATS: Mapping[str, str] = {
    CONTENT_JSON: FORMAT_JSON,
    CONTENT_XML: FORMAT_XML,
    CONTENT_HTML: FORMAT_HTML,
    CONTENT_TEXT: FORMAT_TEXT,
}

# Option attribute holding the content type of each output format
CONTENT_TYPE_FIELDS: Dict[str, str] = {
    'binary': 'content_binary',
    'html': 'content_html',
    'xml': 'content_xml',
    'text': 'content_text',
    'json': 'content_json',
    'jsonp': 'content_jsonp',
}
