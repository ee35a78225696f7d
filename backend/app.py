import logging
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
from domain.constants import BOARD_SIZE, COMMANDS, KEY_BINDINGS
from main import SessionClosedError
from services.session_manager import SessionLimitError, SessionManager, SessionNotFoundError
from webui import STATIC_DIR

logger = logging.getLogger(__name__)


def create_app(manager: Optional[SessionManager] = None) -> Flask:
    """
    Build the Flask app serving the browser page and the session API.

    The session manager is owned by the caller; the app only looks sessions
    up through it.
    """
    app = Flask(__name__, static_folder=STATIC_DIR, static_url_path="/static")
    if manager is None:
        manager = SessionManager(
            tick_interval_ms=config.TICK_INTERVAL_MS,
            max_sessions=config.MAX_SESSIONS,
        )
    app.extensions["snake_sessions"] = manager

    # Enable CORS for API routes so a page served from another origin can play
    CORS(app, resources={r"/api/*": {"origins": config.CORS_ALLOWED_ORIGINS}})

    def _not_found(session_id):
        return jsonify({"error": f"Session '{session_id}' not found"}), 404

    def _closed(session_id):
        return jsonify({"error": f"Session '{session_id}' is closed"}), 409

    @app.route("/", methods=["GET"])
    def index():
        return app.send_static_file("index.html")

    @app.route("/api/config", methods=["GET"])
    def get_config():
        """Static game settings the renderer needs before creating a session."""
        return jsonify({
            "board_size": BOARD_SIZE,
            "tick_interval_ms": manager.tick_interval_ms,
            "commands": sorted(COMMANDS),
            "key_bindings": KEY_BINDINGS,
        })

    @app.route("/api/sessions", methods=["POST"])
    def create_session():
        try:
            session = manager.create_session()
            return jsonify({
                "session_id": session.session_id,
                "state": session.snapshot().to_dict(),
            }), 201

        except SessionLimitError as error:
            logger.warning("Refusing new session: %s", error)
            return jsonify({"error": str(error)}), 503
        except Exception as error:
            logger.exception("Error creating session: %s", error)
            return jsonify({"error": "Failed to create session"}), 500

    @app.route("/api/sessions/<session_id>", methods=["GET"])
    def get_session_state(session_id):
        """
        Current snapshot of a session: snake, food, score, game_over plus
        won, direction, death_reason and tick.
        """
        try:
            session = manager.get_session(session_id)
            return jsonify({"state": session.snapshot().to_dict()})

        except SessionNotFoundError:
            return _not_found(session_id)
        except SessionClosedError:
            return _closed(session_id)
        except Exception as error:
            logger.exception("Error fetching session %s: %s", session_id, error)
            return jsonify({"error": "Failed to load session state"}), 500

    @app.route("/api/sessions/<session_id>/input", methods=["POST"])
    def post_input(session_id):
        """
        Apply a direction change.

        Body: {"key": "ArrowUp"} or {"command": "MOVE_UP"}. Unknown keys and
        reversals are ignored and reported with accepted=false.
        """
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or not ("key" in payload or "command" in payload):
            return jsonify({"error": "Expected a JSON body with 'key' or 'command'"}), 400

        try:
            session = manager.get_session(session_id)
            if "command" in payload:
                accepted = session.handle_command(payload["command"])
            else:
                accepted = session.handle_key(payload["key"])

            return jsonify({
                "accepted": accepted,
                "state": session.snapshot().to_dict(),
            })

        except SessionNotFoundError:
            return _not_found(session_id)
        except SessionClosedError:
            return _closed(session_id)
        except Exception as error:
            logger.exception("Error applying input to session %s: %s", session_id, error)
            return jsonify({"error": "Failed to apply input"}), 500

    @app.route("/api/sessions/<session_id>/restart", methods=["POST"])
    def restart_session(session_id):
        try:
            session = manager.get_session(session_id)
            session.restart()
            return jsonify({"state": session.snapshot().to_dict()})

        except SessionNotFoundError:
            return _not_found(session_id)
        except SessionClosedError:
            return _closed(session_id)
        except Exception as error:
            logger.exception("Error restarting session %s: %s", session_id, error)
            return jsonify({"error": "Failed to restart session"}), 500

    @app.route("/api/sessions/<session_id>", methods=["DELETE"])
    def delete_session(session_id):
        try:
            manager.close_session(session_id)
            return "", 204

        except SessionNotFoundError:
            return _not_found(session_id)
        except Exception as error:
            logger.exception("Error closing session %s: %s", session_id, error)
            return jsonify({"error": "Failed to close session"}), 500

    return app


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    create_app().run(host=config.HOST, port=config.PORT, debug=config.FLASK_DEBUG)
