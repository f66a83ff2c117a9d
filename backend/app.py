from flask import Flask, jsonify, request
from flask_cors import CORS
import logging

import config
from board import BoardBuildError, CellNotFound
from categories import AcquisitionError
from games import GameNotFound, GameStore
from trivia_client import TriviaClient

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "could not load board, try again"


def create_app(store=None):
    app = Flask(__name__)
    CORS(app)
    if store is None:
        store = GameStore(TriviaClient())
    app.config["GAME_STORE"] = store

    def games():
        return app.config["GAME_STORE"]

    @app.errorhandler(GameNotFound)
    def game_not_found(e):
        return jsonify({"error": "game not found"}), 404

    @app.errorhandler(CellNotFound)
    def cell_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(AcquisitionError)
    @app.errorhandler(BoardBuildError)
    def board_failed(e):
        logger.error("Board build failed: %s", e)
        return jsonify({"error": LOAD_FAILED_MESSAGE}), 502

    @app.route("/api/config", methods=["GET"])
    def get_config():
        """Board dimensions, so the page can lay out its placeholders."""
        return jsonify(
            {
                "num_categories": games().num_categories,
                "clues_per_category": config.CLUES_PER_CATEGORY,
            }
        )

    @app.route("/api/games", methods=["POST"])
    def create_game():
        """Start a new game with a freshly built board."""
        session = games().new_game()
        return jsonify(session.to_dict()), 201

    @app.route("/api/games/<game_id>", methods=["POST"])
    def restart_game(game_id):
        """New game under an existing id; the previous board is thrown away."""
        session = games().new_game(game_id)
        return jsonify(session.to_dict()), 201

    @app.route("/api/games/<game_id>", methods=["GET"])
    def get_game(game_id):
        return jsonify(games().get(game_id).to_dict())

    @app.route("/api/games/<game_id>", methods=["DELETE"])
    def delete_game(game_id):
        games().discard(game_id)
        return "", 204

    @app.route("/api/games/<game_id>/reveal", methods=["POST"])
    def reveal(game_id):
        """Advance one cell: hidden -> question -> answer, then no-op."""
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        column = payload.get("column")
        row = payload.get("row")
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (column, row)):
            return jsonify({"error": "column and row must be integers"}), 400

        session = games().get(game_id)
        clue, display = session.board.advance_cell(column, row)
        return jsonify(
            {
                "column": column,
                "row": row,
                "changed": display is not None,
                "display": display,
                "showing": clue.showing.value,
                "value": clue.value,
            }
        )

    return app


if __name__ == "__main__":
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)-12s %(levelname)-8s %(message)s")
    )
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.INFO)

    create_app().run(host=config.HOST, port=config.PORT, debug=False)
