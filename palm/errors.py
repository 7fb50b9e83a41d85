import logging

from flask import jsonify
from pydantic import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

from palm.extensions import db

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map directly onto an HTTP response"""
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, **extra):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.extra = extra

    def to_dict(self):
        payload = {'error': self.message}
        payload.update(self.extra)
        return payload


class Unauthenticated(ApiError):
    status_code = 401
    message = 'Unauthorized'


class Forbidden(ApiError):
    status_code = 403
    message = 'Forbidden'


class NotFound(ApiError):
    status_code = 404
    message = 'Not found'


class ValidationFailed(ApiError):
    status_code = 400
    message = 'Validation failed'


class Conflict(ApiError):
    status_code = 409
    message = 'Conflict'


class AlreadyProcessed(ApiError):
    status_code = 410
    message = 'This request has already been processed'


def schema_error_details(error):
    """Flatten a pydantic error into [{'field': ..., 'message': ...}]"""
    details = []
    for err in error.errors():
        field = '.'.join(str(part) for part in err.get('loc', ())) or '__root__'
        details.append({'field': field, 'message': err.get('msg', 'Invalid value')})
    return details


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(e):
        db.session.rollback()
        return jsonify({'error': 'Validation failed', 'details': schema_error_details(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.exception('Unhandled error: %s', e)
        return jsonify({'error': 'Internal server error'}), 500
