from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/sync/status", methods=["GET"], endpoint="sync_status")
    def sync_status():
        return jsonify(container.sync_context.as_dict())
