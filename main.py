"""
main.py — Stepwise Algorithm Player (Flask JSON API)
=====================================================
The web server that drives steppers for a browser front end.

Routes:
  GET  /api/algorithms         – registry cards (label, family, pseudocode, …)
  POST /api/run                – build a stepper and load it into the player
  POST /api/step/next          – advance one step
  POST /api/step/prev          – undo one step
  POST /api/step/reset         – back to the initial configuration
  POST /api/step/end           – run to completion (capped at MAX_STEPS)
  POST /api/step/play          – toggle play/pause
  POST /api/step/tick          – timer tick while playing
  GET  /api/state              – current player state + stepper view
  POST /api/config/speed       – preset name or seconds per step
  POST /api/sudoku/generate    – new puzzle as 81-digit text
  POST /api/compare            – run two algorithms on the same instance

State management:
  Players live in process memory, keyed by a random id kept in the Flask
  session cookie.  Nothing is persisted.

Configuration:
  engine.settings.DEFAULTS, overridable via STEPWISE_* environment
  variables (e.g. STEPWISE_MAX_GRID=60).
"""

import logging
import secrets
from collections import OrderedDict
from dataclasses import asdict
from typing import Dict

from flask import Flask, jsonify, request, session

from engine import (
    DEFAULTS, SPEED_PRESETS, Player, Recorder, build_params, build_stepper,
    compare, event_to_dict, format_sudoku, stepper_view,
)
from engine.settings import ENV_PREFIX
from steppers import InvalidParameterError, StepperError, generate_puzzle, list_steppers

logger = logging.getLogger(__name__)


app = Flask(__name__)
app.secret_key = secrets.token_hex(32)
app.config.update(DEFAULTS)
app.config.from_prefixed_env(ENV_PREFIX)

# session id → Player, least recently used first
_PLAYERS: "OrderedDict[str, Player]" = OrderedDict()


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def get_player() -> Player:
    """The Player bound to this browser session (created on first use)."""
    sid = session.get("sid")
    if sid is None:
        sid = secrets.token_hex(8)
        session["sid"] = sid
    player = _PLAYERS.get(sid)
    if player is not None:
        _PLAYERS.move_to_end(sid)
        return player
    player = Player(history_limit=int(app.config["HISTORY_LIMIT"]))
    player.set_speed(app.config["DEFAULT_SPEED"])
    _PLAYERS[sid] = player
    while len(_PLAYERS) > max(1, int(app.config["MAX_SESSIONS"])):
        evicted, _ = _PLAYERS.popitem(last=False)
        logger.debug("evicted idle session %s", evicted)
    return player


def json_body() -> Dict:
    """The request's JSON object; anything else reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def get_state(player: Player) -> dict:
    """Current player + stepper state as a JSON-safe dict."""
    event = player.current_event
    return {
        "state":         player.state.value,
        "speed":         player.speed,
        "can_undo":      player.can_undo,
        "steps_taken":   player.steps_taken,
        "current_event": event_to_dict(event) if event else None,
        "view":          stepper_view(player.stepper) if player.stepper else None,
    }


def error(message: str, status: int = 400):
    return jsonify({"error": message}), status


# ---------------------------------------------------------------------------
# API: Registry
# ---------------------------------------------------------------------------
@app.route("/api/algorithms", methods=["GET"])
def api_algorithms():
    return jsonify([
        {
            "key":              info.key,
            "label":            info.label,
            "family":           info.family,
            "pseudocode":       info.pseudocode,
            "tags":             info.tags,
            "randomized":       info.randomized,
            "has_heuristic":    info.has_heuristic,
            "complexity_time":  info.complexity_time,
            "complexity_space": info.complexity_space,
            "description":      info.description,
        }
        for info in list_steppers()
    ])


# ---------------------------------------------------------------------------
# API: Run Algorithm
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
def api_run():
    data = json_body()
    key = data.get("algo_key")
    if not key or not isinstance(key, str):
        return error("algo_key is required")

    try:
        stepper = build_stepper(key, data.get("params") or {}, app.config)
    except (ValueError, StepperError) as e:
        logger.info("rejected run of %s: %s", key, e)
        return error(str(e))

    player = get_player()
    player.start(stepper)
    logger.info("session %s started %s", session["sid"], key)
    return jsonify(get_state(player))


# ---------------------------------------------------------------------------
# API: Step Navigation
# ---------------------------------------------------------------------------
@app.route("/api/step/next", methods=["POST"])
def api_step_next():
    player = get_player()
    if player.stepper is None:
        return error("No algorithm loaded")
    if player.next_step() is None:
        return error("Already at last step")
    return jsonify(get_state(player))


@app.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    player = get_player()
    if not player.prev_step():
        return error("Nothing to undo")
    return jsonify(get_state(player))


@app.route("/api/step/reset", methods=["POST"])
def api_step_reset():
    player = get_player()
    if player.stepper is None:
        return error("No algorithm loaded")
    player.reset()
    return jsonify(get_state(player))


@app.route("/api/step/end", methods=["POST"])
def api_step_end():
    player = get_player()
    if player.stepper is None:
        return error("No algorithm loaded")
    player.jump_to_end(int(app.config["MAX_STEPS"]))
    return jsonify(get_state(player))


@app.route("/api/step/play", methods=["POST"])
def api_step_play():
    player = get_player()
    if player.stepper is None:
        return error("No algorithm loaded")
    player.toggle_play()
    return jsonify({"is_playing": player.is_playing, "state": player.state.value})


@app.route("/api/step/tick", methods=["POST"])
def api_step_tick():
    player = get_player()
    advanced = player.tick()
    payload = get_state(player)
    payload["advanced"] = advanced
    return jsonify(payload)


@app.route("/api/state", methods=["GET"])
def api_state():
    return jsonify(get_state(get_player()))


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    data = json_body()
    speed = data.get("speed", app.config["DEFAULT_SPEED"])
    player = get_player()
    if isinstance(speed, str):
        if speed not in SPEED_PRESETS:
            return error(f"Unknown speed preset '{speed}'")
        player.set_speed(speed)
    else:
        try:
            player.set_speed_value(float(speed))
        except (TypeError, ValueError):
            return error("speed must be a preset name or seconds per step")
    return jsonify({"speed": player.speed})


# ---------------------------------------------------------------------------
# API: Sudoku puzzles
# ---------------------------------------------------------------------------
@app.route("/api/sudoku/generate", methods=["POST"])
def api_sudoku_generate():
    data = json_body()
    try:
        blanks = max(0, min(81, int(data.get("blanks", app.config["SUDOKU_BLANKS"]))))
        seed = data.get("seed")
        grid = generate_puzzle(blanks, seed=None if seed is None else int(seed),
                               unique=bool(data.get("unique", True)))
    except (TypeError, ValueError) as e:
        return error(str(e))
    return jsonify({"puzzle": format_sudoku(grid), "grid": grid})


# ---------------------------------------------------------------------------
# API: Comparison
# ---------------------------------------------------------------------------
@app.route("/api/compare", methods=["POST"])
def api_compare():
    data = json_body()
    left, right = data.get("left") or {}, data.get("right") or {}
    shared = data.get("params") or {}
    if not all(isinstance(part, dict) for part in (left, right, shared)):
        return error("left, right and params must be JSON objects")
    if not isinstance(left.get("algo_key"), str) or not isinstance(right.get("algo_key"), str):
        return error("left.algo_key and right.algo_key are required")

    # one shared seed so both sides see the same generated instance
    shared = dict(shared)
    shared.setdefault("seed", secrets.randbits(32))

    recorders = []
    try:
        for side in (left, right):
            own = side.get("params") or {}
            if not isinstance(own, dict):
                raise InvalidParameterError("params must be a JSON object")
            params = build_params(side["algo_key"], {**shared, **own}, app.config)
            rec = Recorder()
            rec.start(side["algo_key"], **params)
            rec.run_to_completion(int(app.config["MAX_STEPS"]))
            recorders.append(rec)
    except (ValueError, StepperError) as e:
        return error(str(e))

    result = compare(*recorders)
    return jsonify({
        "left":         asdict(result.left),
        "right":        asdict(result.right),
        "winner_steps": result.winner_steps,
        "same_outcome": result.same_outcome,
    })


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Stepwise algorithm player on http://localhost:5000")
    app.run(debug=False, host="0.0.0.0", port=5000)
