from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.validators import optional_float, optional_text, require_enum, require_non_empty
from ..container import Container
from ..core.enums import CheckinMethod, IdentifierType
from ..core.exceptions import (
    AuthenticationError,
    CheckinDenied,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from ..eligibility.model import EligibilityRequest


def register(app: Flask, container: Container) -> None:
    def json_errors(view):
        """Map domain/infrastructure exceptions onto JSON responses."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "error": str(e)}), 400
            except AuthenticationError as e:
                return jsonify({"success": False, "error": str(e)}), 401
            except NotFoundError as e:
                return jsonify({"success": False, "error": str(e)}), 404
            except CheckinDenied as e:
                return jsonify(_denied_body(e.result)), 403
            except InfrastructureError:
                app.logger.exception("self check-in failed on a repository call")
                return jsonify({"success": False, "error": "Check-in is temporarily unavailable, please retry"}), 503

        return wrapper

    def _denied_body(result) -> dict:
        body = {"success": False, "error": result.reason, "code": result.code.value}
        extras = {
            "requiresLogin": result.requires_login,
            "requiresInvite": result.requires_invite,
            "distanceMeters": result.distance_meters,
            "geofenceRadius": result.geofence_radius,
        }
        body.update({k: v for k, v in extras.items() if v is not None})
        return body

    def _payload() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _position(data: dict) -> dict:
        return {
            "lat": optional_float(data.get("lat"), "lat", low=-90.0, high=90.0),
            "lng": optional_float(data.get("lng"), "lng", low=-180.0, high=180.0),
            "accuracy": optional_float(data.get("accuracy"), "accuracy", low=0.0, high=float("inf")),
        }

    def _caller_user_id():
        user_id = session.get("user_id")
        return str(user_id) if user_id else None

    @app.route("/<org_id>/api/self-checkin/eligibility", methods=["POST"], endpoint="self_checkin_eligibility")
    @json_errors
    def self_checkin_eligibility(org_id: str):
        """Dry run: evaluate without recording anything."""
        data = _payload()
        eligibility_request = EligibilityRequest(
            org_id=org_id,
            session_id=require_non_empty(data.get("session_id"), "session_id"),
            method=require_enum(data.get("method"), CheckinMethod, "method"),
            person_id=optional_text(data.get("person_id")),
            user_id=_caller_user_id(),
            event_code=optional_text(data.get("event_code")),
            qr_token=optional_text(data.get("qr_token")),
            **_position(data),
        )
        result = container.eligibility_service.check(eligibility_request)
        return jsonify(result.to_dict()), 200

    @app.route("/<org_id>/api/self-checkin/public", methods=["POST"], endpoint="self_checkin_public")
    @json_errors
    def self_checkin_public(org_id: str):
        data = _payload()
        receipt = container.checkin_service.public_checkin(
            org_id=org_id,
            session_code=optional_text(data.get("session_code")),
            qr_token=optional_text(data.get("qr_token")),
            identifier=optional_text(data.get("identifier")),
            identifier_type=require_enum(data.get("identifier_type", "phone"), IdentifierType, "identifier_type"),
            **_position(data),
        )
        return jsonify(receipt.to_dict()), 200

    @app.route("/<org_id>/api/self-checkin/auth", methods=["POST"], endpoint="self_checkin_auth")
    @json_errors
    def self_checkin_auth(org_id: str):
        user_id = _caller_user_id()
        if not user_id:
            raise AuthenticationError("Authentication required")

        data = _payload()
        receipt = container.checkin_service.authenticated_checkin(
            org_id=org_id,
            user_id=user_id,
            session_id=optional_text(data.get("session_id")),
            method=require_enum(data.get("method"), CheckinMethod, "method"),
            event_code=optional_text(data.get("event_code")),
            qr_token=optional_text(data.get("qr_token")),
            **_position(data),
        )
        return jsonify(receipt.to_dict()), 200

    @app.route("/<org_id>/api/events/<session_id>/kiosk-checkin", methods=["POST"], endpoint="kiosk_checkin")
    @json_errors
    def kiosk_checkin(org_id: str, session_id: str):
        data = _payload()
        receipt = container.checkin_service.kiosk_checkin(
            org_id=org_id,
            session_id=session_id,
            person_checkin_code=optional_text(data.get("person_checkin_code")),
            **_position(data),
        )
        return jsonify(receipt.to_dict()), 200
