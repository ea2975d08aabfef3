"""HTTP API: nickname and analysis on /api/calculate-result.

Run with ``flask --app brightfuture.api run``.
"""
from __future__ import annotations

from typing import Any, Optional

from flask import Flask, jsonify, request

from brightfuture.analysis import handle_analysis_request
from brightfuture.config import Settings
from brightfuture.log_config import get_logger, setup_logging
from brightfuture.nickname import generate_nickname

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, client: Optional[Any] = None) -> Flask:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_json)

    app = Flask(__name__)
    app.config.setdefault("MAX_CONTENT_LENGTH", 1 * 1024 * 1024)  # 1 MB
    app.json.ensure_ascii = False

    @app.get("/api/calculate-result")
    def nickname():
        return jsonify({"nickname": generate_nickname()})

    @app.post("/api/calculate-result")
    def calculate_result():
        body = request.get_json(silent=True)
        status, payload = handle_analysis_request(body, settings, client=client)
        return jsonify(payload), status

    return app
