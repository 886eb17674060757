import logging
import os

from flask import Flask, send_from_directory

from uploader.config import Settings, load_settings
from uploader.observability.request_context import RequestIdFilter, end_request, start_request
from uploader.routes.files import files_bp
from uploader.routes.policy import policy_bp
from uploader.routes.upload import upload_bp
from uploader.services.upload.policy import DEFAULT_POLICY, UploadPolicy
from uploader.services.upload.sink import UploadSink, build_sink

# room for multipart boundaries and headers on top of the file itself
MULTIPART_SLACK = 1024 * 1024

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


def configure_logging(level="INFO"):
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger("uploader")
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def create_app(settings: Settings = None, sink: UploadSink = None, policy: UploadPolicy = DEFAULT_POLICY):
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    # frontend/ ships inside the package next to this file
    app = Flask(__name__, static_folder=os.path.join(os.path.dirname(__file__), "frontend"), static_url_path="/static")
    app.config["MAX_CONTENT_LENGTH"] = policy.max_bytes + MULTIPART_SLACK
    app.config["SETTINGS"] = settings

    app.extensions["upload_sink"] = sink or build_sink(settings)
    app.extensions["upload_policy"] = policy

    app.register_blueprint(upload_bp)
    app.register_blueprint(files_bp)
    app.register_blueprint(policy_bp, url_prefix="/api")

    @app.route("/")
    def index():
        return send_from_directory(app.static_folder, "index.html")

    @app.before_request
    def _before():
        start_request()

    @app.after_request
    def _after(response):
        return end_request(response)

    return app


def main():
    settings = load_settings()
    app = create_app(settings)
    logging.getLogger(__name__).info("Server listening on port %s", settings.port)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
