from flask import Blueprint, current_app, jsonify

policy_bp = Blueprint("policy", __name__)


@policy_bp.route("/policy", methods=["GET"])
def policy():
    return jsonify(current_app.extensions["upload_policy"].to_dict())
