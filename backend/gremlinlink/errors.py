from flask import current_app, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from gremlinlink.domain.exceptions import BlockNotFound, SlugConflict, StoreUnavailable
from gremlinlink.domain.invariants.exceptions import InvariantViolation


def _error(name, message, status_code, **extra):
    response = jsonify({"error": name, "message": message, **extra})
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return _error("InvariantViolation", str(error), 400)

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return _error(
            "ValidationError",
            "Invalid request body",
            400,
            details=error.errors(include_url=False, include_context=False, include_input=False),
        )

    @app.errorhandler(BlockNotFound)
    def handle_block_not_found(error):
        return _error("NotFound", str(error), 404)

    @app.errorhandler(SlugConflict)
    def handle_slug_conflict(error):
        return _error("SlugConflict", str(error), 409)

    @app.errorhandler(StoreUnavailable)
    def handle_store_unavailable(error):
        current_app.logger.error("Store unavailable: %s", error)
        return _error("StoreUnavailable", "Content store unavailable", 503)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return _error(error.name.replace(" ", ""), error.description, error.code)
