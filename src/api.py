"""

    Server API for the hobbits service

    Copyright (C) 2024 Miðeind ehf.
    Original author: Vilhjálmur Þorsteinsson

    The Creative Commons Attribution-NonCommercial 4.0
    International Public License (CC-BY-NC 4.0) applies to this software.
    For further information, see https://github.com/mideind/Netskrafl


    This module contains the JSON API entry points of the server.

"""

from __future__ import annotations
from functools import wraps

from typing import Sequence, Any

from flask import Blueprint

from config import RouteType, ResponseType, WELCOME_MESSAGE
from basics import RouteFunc, jsonify
from db import get_db


# The API endpoints are read-only
_ONLY_GET: Sequence[str] = ["GET"]

# Register the Flask blueprint for the APIs
api = api_blueprint = Blueprint("api", __name__)


def api_route(route: str, methods: Sequence[str] = _ONLY_GET) -> RouteFunc:
    """Decorator for API routes; checks that the name of the route function ends with '_api'"""

    def decorator(f: RouteType) -> RouteType:

        assert f.__name__.endswith("_api"), f"Name of API function '{f.__name__}' must end with '_api'"

        @api.route(route, methods=methods)
        @wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> ResponseType:
            return f(*args, **kwargs)

        return wrapper

    return decorator


@api_route("/")
def welcome_api() -> ResponseType:
    """Greet the client"""
    return jsonify(message=WELCOME_MESSAGE)


@api_route("/hobbits")
def hobbits_api() -> ResponseType:
    """Return all hobbits, ordered by id"""
    db = get_db()
    return jsonify([h.to_dict() for h in db.hobbits.list_all()])
