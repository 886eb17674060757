from flask import Blueprint, abort, current_app, send_from_directory

from uploader.services.upload.sink import LocalDirectorySink

files_bp = Blueprint("files", __name__)


@files_bp.route("/files/<path:name>", methods=["GET"])
def stored_file(name):
    sink = current_app.extensions["upload_sink"]
    if not isinstance(sink, LocalDirectorySink):
        abort(404)

    response = send_from_directory(sink.directory, name)
    # uploads share the app's origin; never let one run script (svg is an allowed image type)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Content-Security-Policy"] = "default-src 'none'; sandbox"
    return response
