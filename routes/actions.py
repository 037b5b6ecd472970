import logging

from flask import Blueprint, current_app, jsonify, request

from dao import action as action_dao
from dao.errors import ValidationError

log = logging.getLogger(__name__)

action_bp = Blueprint("action_api", __name__)


@action_bp.route("/perform_action", methods=["POST"])
def perform_action():
    body = request.get_json(silent=True)
    if not isinstance(body, dict) or not isinstance(body.get("action"), dict):
        return _error(ValidationError("request body must be {\"action\": {...}}"), 400)

    try:
        result = action_dao.perform_action(
            body["action"],
            record_failure=current_app.config.get("ACTION_RECORD_FAILURES", True),
        )
    except Exception:
        # details already logged by the DAO; do not leak them to the client
        return jsonify({"error": "internal server error"}), 500

    if not result.ok:
        return _error(result.error, 400)

    return jsonify(
        {
            "success": True,
            "action_id": result.action_id,
            "message": "action completed",
        }
    )


@action_bp.route("/actions")
def action_list():
    limit = request.args.get("limit", 50, type=int)
    rows = action_dao.list_actions(limit=max(1, min(limit, 500)))
    return jsonify([action_dao.to_dict(a) for a in rows])


@action_bp.route("/actions/failures")
def action_failures():
    limit = request.args.get("limit", 50, type=int)
    rows = action_dao.list_failures(limit=max(1, min(limit, 500)))
    return jsonify([action_dao.failure_to_dict(f) for f in rows])


@action_bp.route("/actions/<action_id>")
def action_detail(action_id: str):
    a = action_dao.get_action(action_id)
    if not a:
        return jsonify({"error": f"action does not exist: {action_id}"}), 404
    return jsonify(action_dao.to_dict(a))


def _error(err, status: int):
    return jsonify({"error": str(err)}), status
