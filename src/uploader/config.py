import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    sink: str = "local"
    sink_url: str = ""
    sink_token: str = ""
    sink_timeout: float = 30.0
    sink_url_field: str = "url"
    upload_dir: str = os.path.join("storage", "uploads")
    public_base_url: str = f"http://localhost:{DEFAULT_PORT}"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment (``os.environ`` by default)."""
    env = os.environ if environ is None else environ

    port = int(env.get("PORT", DEFAULT_PORT))
    sink = env.get("UPLOAD_SINK", "local").strip().lower()
    if sink not in ("local", "http"):
        raise ValueError(f"Unknown UPLOAD_SINK: {sink}")

    return Settings(
        port=port,
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        sink=sink,
        sink_url=env.get("UPLOAD_SINK_URL", ""),
        sink_token=env.get("UPLOAD_SINK_TOKEN", ""),
        sink_timeout=float(env.get("UPLOAD_SINK_TIMEOUT", 30)),
        sink_url_field=env.get("UPLOAD_SINK_URL_FIELD", "url"),
        upload_dir=env.get("UPLOAD_DIR", os.path.join("storage", "uploads")),
        public_base_url=env.get("PUBLIC_BASE_URL", f"http://localhost:{port}").rstrip("/"),
    )
