"""

    Basic utility functions

    Copyright (C) 2024 Miðeind ehf.
    Original author: Vilhjálmur Þorsteinsson

    The Creative Commons Attribution-NonCommercial 4.0
    International Public License (CC-BY-NC 4.0) applies to this software.
    For further information, see https://github.com/mideind/Netskrafl


    This module defines helpers that are shared
    by the main.py and api.py modules.

"""

from __future__ import annotations

from typing import Any, Callable

from flask import jsonify as flask_jsonify
from flask.wrappers import Response

from config import RouteType


# A Flask route function decorator
RouteFunc = Callable[[RouteType], RouteType]


# Type annotation wrapper for flask.jsonify()
def jsonify(*args: Any, **kwargs: Any) -> Response:
    response = flask_jsonify(*args, **kwargs)
    response.headers["Content-Type"] = "application/json; charset=UTF-8"
    return response


def error_response(message: str, status: int) -> Response:
    """Return a JSON error body with the given HTTP status"""
    response = jsonify(message=message)
    response.status_code = status
    return response
