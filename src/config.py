"""

    Configuration data

    Copyright (C) 2024 Miðeind ehf.
    Original author: Vilhjálmur Þorsteinsson

    The Creative Commons Attribution-NonCommercial 4.0
    International Public License (CC-BY-NC 4.0) applies to this software.
    For further information, see https://github.com/mideind/Netskrafl


    This module reads the web server's configuration parameters
    from environment variables. Database settings are read by
    db/config.py.

"""

from __future__ import annotations

from typing import (
    NotRequired,
    TypedDict,
    Union,
    Tuple,
    Callable,
)
import os
from werkzeug.wrappers import Response as WerkzeugResponse
from flask.wrappers import Response


# Universal type definitions
ResponseType = Union[
    str, bytes, Response, WerkzeugResponse, Tuple[str, int], Tuple[Response, int]
]
RouteType = Callable[..., ResponseType]


class FlaskConfig(TypedDict):
    """The Flask configuration dictionary"""

    DEBUG: bool
    TESTING: NotRequired[bool]


# Are we running in a local development environment?
running_local: bool = os.environ.get("SERVER_SOFTWARE", "").startswith("Development")
# Set SERVER_HOST to 0.0.0.0 to accept HTTP connections from the outside
host: str = os.environ.get("SERVER_HOST", "127.0.0.1")
port: str = os.environ.get("SERVER_PORT", "8080")

# Origins allowed to call the API from a browser during local development
CORS_ORIGINS = ["http://127.0.0.1:3000", "http://localhost:3000"]

WELCOME_MESSAGE = "Welcome to our API"
