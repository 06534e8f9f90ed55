from flask import jsonify
from werkzeug.exceptions import HTTPException
from app.domain.invariants.exceptions import (
    IllegalTransition,
    InvariantViolation,
    PageNotFound,
    SectionNotFound,
    WriteFailed,
)


def _error(name, message, status_code):
    response = jsonify({
        "error": name,
        "message": message
    })
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return _error("InvariantViolation", str(error), 400)

    @app.errorhandler(IllegalTransition)
    def handle_illegal_transition(error):
        return _error("IllegalTransition", str(error), 409)

    @app.errorhandler(SectionNotFound)
    @app.errorhandler(PageNotFound)
    def handle_not_found(error):
        return _error(type(error).__name__, str(error), 404)

    @app.errorhandler(WriteFailed)
    def handle_write_failed(error):
        # Nothing was applied; safe to retry
        response = _error(type(error).__name__, str(error), 503)
        response.headers["Retry-After"] = "1"
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return _error(error.name, error.description, error.code)
