"""
API authentication routes for the Mente Tech blog.

Routes:
    /login: Authenticate user and issue JWT token
    /me: Return the authenticated user
"""

import logging

from flask import g, jsonify
from marshmallow import fields

from api.schemas import BaseSchema, load_json
from extensions import limiter
from services.auth_service import AuthService
from . import auth_api
from .decorators import token_required

logger = logging.getLogger(__name__)


class LoginSchema(BaseSchema):
    email = fields.String(required=True)
    password = fields.String(required=True)


@auth_api.route('/login', methods=['POST'])
@limiter.limit("10/minute")
def login():
    """
    API endpoint for user authentication.

    Request Body:
        {
            "email": "string",
            "password": "string"
        }

    Returns:
        200 OK: Authentication successful
            {
                "token": "jwt_token_string",
                "user": {...}
            }
        400 BAD REQUEST: Missing credentials
        401 UNAUTHORIZED: Invalid credentials
    """
    data = load_json(LoginSchema)

    success, user, error_message = AuthService.authenticate_user(data['email'], data['password'])
    if not success:
        return jsonify({"error": error_message, "code": "INVALID_CREDENTIALS"}), 401

    token = AuthService.generate_api_token(user)
    return jsonify({"token": token, "user": user.to_dict()}), 200


@auth_api.route('/me', methods=['GET'])
@token_required
def me():
    """Return the user behind the presented token."""
    return jsonify({"user": g.user.to_dict(), "is_admin": g.auth_context.is_admin}), 200
