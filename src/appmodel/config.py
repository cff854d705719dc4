"""
Configuration & Constants
=========================
Central registry for the global constants shared by the model layer.

Why is this file needed?
------------------------
1. Abstraction: Magic strings (id prefixes, encoding tables) live in one place
   instead of being scattered through the model code.
2. Overrides: Applications can read these values when they build their own
   id generators or escaping helpers, so both sides agree on the format.

Exports:
    LOGGER_NAME (str): Root logger namespace of the package.
    CLIENT_ID_PREFIX (str): Prefix of generated client ids ("c1", "c2", ...).
    DEFAULT_ID (str): Value of the `id` attribute of a model that was never saved.
    HTML_EXTRA_ESCAPES (dict): Characters `Model.get_as_html` escapes on top of
        `html.escape`.
    URL_SAFE_CHARS (str): Characters left unencoded by `Model.get_as_url`.
    PARSE_ERROR_MESSAGE (str): Error payload used when no decoder is configured.
"""

LOGGER_NAME: str = "appmodel"

CLIENT_ID_PREFIX: str = "c"
DEFAULT_ID: str = ""

# Same unreserved set as JavaScript's encodeURIComponent
# (quote() always keeps letters, digits and "_.-~")
URL_SAFE_CHARS: str = "!*'()"

# Escaped in addition to html.escape's set
HTML_EXTRA_ESCAPES: dict = str.maketrans({"/": "&#x2F;", "`": "&#x60;"})

PARSE_ERROR_MESSAGE: str = "Unable to parse response."
