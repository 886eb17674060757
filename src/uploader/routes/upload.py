import logging

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from uploader.errors import MSG_REQUEST_FAILED, MSG_TOO_LARGE
from uploader.services.upload.handler import handle_upload

logger = logging.getLogger(__name__)

upload_bp = Blueprint("upload", __name__)


@upload_bp.route("/upload", methods=["POST"])
def upload_file():
    """
    Accept one file in the ``file`` field and hand it to the configured sink.

    Always answers 200; failures are reported in the body as ``{"success": false, "error": ...}``.
    """
    sink = current_app.extensions["upload_sink"]
    policy = current_app.extensions["upload_policy"]

    try:
        file = request.files.get("file")
        return jsonify(handle_upload(file, sink, policy))
    except RequestEntityTooLarge:
        logger.info("Upload rejected while parsing: body of %s bytes", request.content_length)
        return jsonify({"success": False, "error": MSG_TOO_LARGE})
    except Exception:
        logger.exception("Upload failed")
        return jsonify({"success": False, "error": MSG_REQUEST_FAILED})
