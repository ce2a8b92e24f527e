"""
Flask server exposing the ranked list and notes on localhost.
"""
import socket
import threading
from typing import Any, Optional, Tuple
from flask import Flask, jsonify, request
from ..tracking.tracker import UsageTracker


def find_free_port(preferred: int = 5055) -> int:
    """Try preferred port, fall back if unavailable."""
    for port in (preferred, 5056, 8085):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind(("127.0.0.1", port))
                return port
            except OSError:
                continue
    raise RuntimeError(f"No free port found ({preferred}/5056/8085 busy)")


def _items_payload(tracker: UsageTracker) -> Any:
    return jsonify([item.to_dict() for item in tracker.items])


def _path_from_body() -> Tuple[Optional[str], Any]:
    body = request.get_json(silent=True) or {}
    path = body.get("path")
    if not isinstance(path, str) or not path:
        return None, body
    return path, body


def create_app(tracker: UsageTracker) -> Flask:
    """Create the Flask app bound to one tracker."""
    app = Flask(__name__)

    @app.route("/api/items")
    def api_items() -> Any:  # pyright: ignore[reportUnusedFunction]
        return _items_payload(tracker)

    @app.route("/api/refresh", methods=["POST"])
    def api_refresh() -> Any:  # pyright: ignore[reportUnusedFunction]
        tracker.refresh()
        return _items_payload(tracker)

    @app.route("/api/reset", methods=["POST"])
    def api_reset() -> Any:  # pyright: ignore[reportUnusedFunction]
        tracker.reset_counts()
        return _items_payload(tracker)

    @app.route("/api/open", methods=["POST"])
    def api_open() -> Any:  # pyright: ignore[reportUnusedFunction]
        path, _ = _path_from_body()
        if path is None:
            return jsonify({"error": "Missing path"}), 400

        item = tracker.find_item(path)
        if item is None:
            return jsonify({"error": f"Not in the list: {path}"}), 404

        updated = tracker.open_item(item)
        return jsonify(updated.to_dict() if updated else item.to_dict())

    @app.route("/api/notes", methods=["GET"])
    def api_get_note() -> Any:  # pyright: ignore[reportUnusedFunction]
        path = request.args.get("path")
        if not path:
            return jsonify({"error": "Missing path parameter"}), 400
        return jsonify({"path": path, "note": tracker.note_for_path(path)})

    @app.route("/api/notes", methods=["PUT"])
    def api_set_note() -> Any:  # pyright: ignore[reportUnusedFunction]
        path, body = _path_from_body()
        if path is None:
            return jsonify({"error": "Missing path"}), 400

        text = body.get("text")
        if text is not None and not isinstance(text, str):
            return jsonify({"error": "text must be a string"}), 400

        stored = tracker.set_note_for_path(text, path)
        return jsonify({"path": path, "note": stored})

    return app


def start_server(tracker: UsageTracker, preferred_port: int = 5055) -> int:
    """Run the API on a daemon thread and return its port."""
    app = create_app(tracker)
    port = find_free_port(preferred_port)

    def run() -> None:
        app.run(host="127.0.0.1", port=port, debug=False, use_reloader=False)

    threading.Thread(target=run, daemon=True).start()
    print(f"Dashboard API at http://127.0.0.1:{port}/api/items")
    return port
