"""

    Web server for the hobbits API

    Copyright (C) 2024 Miðeind ehf.
    Original author: Vilhjálmur Þorsteinsson

    The Creative Commons Attribution-NonCommercial 4.0
    International Public License (CC-BY-NC 4.0) applies to this software.
    For further information, see https://github.com/mideind/Netskrafl


    This Python >= 3.11 web server module uses the Flask framework
    to implement a small JSON API.

    The API entrypoints are defined in api.py.

    The database layer, including the seed loader, is found
    in the db package.

"""

from __future__ import annotations

from typing import Union

import logging

from logging.config import dictConfig

from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import (
    FlaskConfig,
    CORS_ORIGINS,
    running_local,
    host,
    port,
    ResponseType,
)
from basics import error_response
from db import init_session_manager, db_wsgi_middleware, get_db
from api import api_blueprint


# Configure logging
dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
            }
        },
        "handlers": {
            "wsgi": {
                "class": "logging.StreamHandler",
                "stream": "ext://flask.logging.wsgi_errors_stream",
                "formatter": "default",
            }
        },
        "root": {"level": "INFO", "handlers": ["wsgi"]},
    }
)

if running_local:
    logging.info("Hobbits app running with DEBUG set to True")

# Initialize the database connection pool, from DATABASE_URL
init_session_manager()

# Initialize Flask
app = Flask(__name__)

# Wrap the WSGI app to run each request within a database session,
# committed on success and rolled back on failure
setattr(app, "wsgi_app", db_wsgi_middleware(app.wsgi_app))

# Initialize Cross-Origin Resource Sharing (CORS) Flask plug-in
if running_local:
    CORS(app, origins=CORS_ORIGINS)

flask_config = FlaskConfig(DEBUG=running_local)

# Load the Flask configuration
app.config.update(**flask_config)

# Register the Flask blueprint for the api routes
app.register_blueprint(api_blueprint)


@app.errorhandler(404)
def not_found(e: Union[int, Exception]) -> ResponseType:
    """Return a JSON 404 error"""
    return error_response("Not found", 404)


@app.errorhandler(405)
def method_not_allowed(e: Union[int, Exception]) -> ResponseType:
    """Return a JSON 405 error"""
    return error_response("Method not allowed", 405)


@app.errorhandler(500)
def server_error(e: Union[int, Exception]) -> ResponseType:
    """Return a JSON 500 error"""
    if isinstance(e, HTTPException) and e.original_exception is not None:  # type: ignore[attr-defined]
        e = e.original_exception  # type: ignore[attr-defined]
    logging.error(f"Server error: {e}")
    # Discard any partial writes before the request context commits
    get_db().rollback()
    return error_response("An error occurred in the server", 500)


# Run a default Flask web server for testing if invoked directly as a main program
if __name__ == "__main__":
    app.run(
        debug=True,
        port=int(port),
        use_debugger=True,
        threaded=False,
        processes=1,
        host=host,  # Set by default to "127.0.0.1" in config.py
    )
