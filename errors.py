"""Typed API errors and their JSON rendering.

Handlers raise these instead of building error responses by hand; the
app factory registers ``register_error_handlers`` so every failure leaves
the API in the same ``{success, message, errors}`` envelope.
"""

import logging

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    default_message = "Une erreur interne est survenue"

    def __init__(self, message: str | None = None, errors: list | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailed(ApiError):
    status_code = 400
    default_message = "Données invalides"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Authentification requise"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Accès non autorisé"


class NotFound(ApiError):
    status_code = 404
    default_message = "Ressource non trouvée"


class DomainError(ApiError):
    """A request that is well-formed but breaks a business rule."""

    status_code = 400
    default_message = "Opération impossible"


class InvalidOrExpiredToken(DomainError):
    default_message = "Token invalide ou expiré"


class EmailDeliveryError(ApiError):
    status_code = 500
    default_message = "Erreur lors de l'envoi de l'email de réinitialisation"


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        if exc.code == 404:
            message = "Route non trouvée"
        elif exc.code == 405:
            message = "Méthode non autorisée"
        else:
            message = exc.description
        return jsonify(success=False, message=message), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        body = {"success": False, "message": ApiError.default_message}
        if current_app.debug:
            body["error"] = str(exc)
        return jsonify(body), 500
