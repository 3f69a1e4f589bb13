"""HTTP handlers and routes for the user endpoints.

The signed-in user's id is read from ``flask.g.user_id``; an authentication
layer placed in front of these routes is expected to set it.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Flask, Response, g, request

from ..dbs import Database
from ..response import error_response, json_response
from .dto import ChangePasswordRequest, RegisterRequest, UserOut, ValidationError
from .repository import UserRepository
from .service import UserService

logger = logging.getLogger(__name__)

ROUTE_PREFIX = "/api/v1/auth"


class UserHandler:
    """Flask views over a UserService."""

    def __init__(self, service: UserService) -> None:
        self._service = service

    def register(self) -> Response:
        try:
            req = RegisterRequest.from_json(request.get_json(silent=True))
        except ValidationError as exc:
            logger.error("Failed to get body: %s", exc)
            return error_response(400, exc, "Invalid parameters")

        try:
            user = self._service.register(req)
        except Exception as exc:
            logger.error("%s", exc)
            return error_response(500, exc, "Something went wrong")

        return json_response({"user": UserOut.from_user(user).to_dict()})

    def get_me(self) -> Response:
        user_id = g.get("user_id", "")
        if not user_id:
            return error_response(401, "unauthorized", "Unauthorized")

        try:
            user = self._service.get_user_by_id(user_id)
        except Exception as exc:
            logger.error("%s", exc)
            return error_response(500, exc, "Something went wrong")

        return json_response(UserOut.from_user(user).to_dict())

    def change_password(self) -> Response:
        try:
            req = ChangePasswordRequest.from_json(request.get_json(silent=True))
        except ValidationError as exc:
            logger.error("Failed to get body: %s", exc)
            return error_response(400, exc, "Invalid parameters")

        user_id = g.get("user_id", "")
        try:
            self._service.change_password(user_id, req)
        except Exception as exc:
            logger.error("%s", exc)
            return error_response(500, exc, "Something went wrong")

        return json_response(None)


def register_routes(app: Flask, database: Database) -> Blueprint:
    """Wire the user endpoints under ``/api/v1/auth`` onto ``app``."""
    handler = UserHandler(UserService(UserRepository(database)))
    blueprint = Blueprint("auth", __name__, url_prefix=ROUTE_PREFIX)
    blueprint.add_url_rule("/register", view_func=handler.register, methods=["POST"])
    blueprint.add_url_rule("/me", view_func=handler.get_me, methods=["GET"])
    blueprint.add_url_rule(
        "/change-password", view_func=handler.change_password, methods=["PUT"]
    )
    app.register_blueprint(blueprint)
    return blueprint