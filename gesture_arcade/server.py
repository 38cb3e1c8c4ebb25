"""
Websocket server: browser clients run hand tracking locally, stream the
detected hands here and get one game report back per frame.
"""
import json
import logging
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Literal, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from .capture import CaptureManager, RemoteCapture
from .config import Cfg, load_config
from .content import ContentProviderProto, MockContentProvider
from .games import GAMES, AcquisitionFailed, GamePhase, GameReport
from .runner import GameRunner
from .types import FrameResult, Hand, Landmark, TickReport

logger = logging.getLogger(__name__)


# Models
class LandmarkModel(BaseModel):
    x: float
    y: float
    z: float = 0.0


class HandModel(BaseModel):
    landmarks: List[LandmarkModel]
    handedness: Optional[Literal["Left", "Right"]] = None
    score: float = 1.0


class StartMessage(BaseModel):
    type: Literal["start"]
    timestamp: float
    options: Dict[str, Any] = Field(default_factory=dict)


class FrameMessage(BaseModel):
    type: Literal["frame"]
    timestamp: float  # seconds, monotonic on the client
    hands: List[HandModel] = Field(default_factory=list)


class SubmitMessage(BaseModel):
    type: Literal["submit"]


class StopMessage(BaseModel):
    type: Literal["stop"]


class AcquisitionFailedMessage(BaseModel):
    """Client-side camera denial or model load failure."""
    type: Literal["acquisition_failed"]
    timestamp: float
    error: str = "Camera or hand model unavailable"


MESSAGES = {
    "start": StartMessage,
    "frame": FrameMessage,
    "submit": SubmitMessage,
    "stop": StopMessage,
    "acquisition_failed": AcquisitionFailedMessage,
}


def to_frame(message: FrameMessage) -> FrameResult:
    return FrameResult(
        hands=[
            Hand(
                landmarks=[Landmark(lm.x, lm.y, lm.z) for lm in hand.landmarks],
                handedness=hand.handedness,
                score=hand.score,
            )
            for hand in message.hands
        ],
        timestamp_ms=int(message.timestamp * 1000),
    )


def _gesture(gesture) -> Dict[str, Any]:
    return {"type": type(gesture).__name__, **asdict(gesture)}


def tick_to_dict(tick: TickReport) -> Dict[str, Any]:
    return {
        "hands": [
            {"fingers": list(state.fingers), "raised": state.raised,
             "pointing": state.is_pointing, "pinching": state.is_pinching}
            for state in tick.hands
        ],
        "total_raised": tick.total_raised,
        "gesture": _gesture(tick.gesture),
        "bindings": tick.bindings,
        "role_gestures": {name: _gesture(g) for name, g in tick.role_gestures.items()},
        "cursors": tick.cursors,
        "confirmed": None if tick.confirmed is None else {"value": tick.confirmed.value},
        "hold_candidate": tick.hold_candidate,
        "hold_progress": tick.hold_progress,
    }


def report_to_dict(report: GameReport) -> Dict[str, Any]:
    return {
        "game": report.game,
        "phase": report.phase.value,
        "score": report.score,
        "tick": None if report.tick is None else tick_to_dict(report.tick),
        "notices": report.notices,
        "countdown": report.countdown,
        "time_left": report.time_left,
        "feedback": report.feedback,
        "error": report.error,
        "view": report.view,
    }


def create_app(cfg: Cfg, provider_factory: Optional[Callable[[], ContentProviderProto]] = None) -> FastAPI:
    """Build the FastAPI app serving every game over ``/ws/{game}``."""
    provider_factory = provider_factory or MockContentProvider
    app = FastAPI(title="Gesture Arcade API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    active_sessions: Dict[int, GameRunner] = {}

    async def send_error(websocket: WebSocket, message: str) -> None:
        await websocket.send_json({'type': 'error', 'data': {'message': message}})

    @app.websocket("/ws/{game}")
    async def websocket_game_endpoint(websocket: WebSocket, game: str):
        """Play one game per connection."""
        await websocket.accept()

        if game not in GAMES:
            await send_error(websocket, f"Unknown game {game!r}")
            await websocket.close()
            return

        # remote frames never touch the local camera
        runner = GameRunner(
            GAMES[game](cfg, captures=CaptureManager(), opener=RemoteCapture),
            provider_factory(),
        )
        session_id = id(websocket)
        active_sessions[session_id] = runner
        logger.info("Client connected to %s", game)

        try:
            while True:
                data = await websocket.receive_text()
                try:
                    raw = json.loads(data)
                    model = MESSAGES[raw.get('type')]
                    message = model.model_validate(raw)
                except (ValueError, KeyError, AttributeError, ValidationError) as e:
                    await send_error(websocket, f"Malformed message: {e}")
                    continue

                if isinstance(message, StartMessage):
                    if runner.game.phase not in (GamePhase.IDLE, GamePhase.GAME_OVER):
                        await send_error(websocket, f"{game} is already running")
                        continue
                    try:
                        started = runner.start(message.timestamp, **message.options)
                    except (TypeError, ValueError) as e:
                        await send_error(websocket, f"Invalid options: {e}")
                        continue
                    await websocket.send_json({
                        'type': 'started' if started else 'error',
                        'data': {'game': game, 'message': runner.game.error},
                    })

                elif isinstance(message, FrameMessage):
                    report = runner.tick(to_frame(message), message.timestamp)
                    await websocket.send_json({'type': 'report', 'data': report_to_dict(report)})

                elif isinstance(message, SubmitMessage):
                    submit = getattr(runner.game, "submit", None)
                    if submit is None or not submit():
                        await send_error(websocket, "Nothing to submit")

                elif isinstance(message, AcquisitionFailedMessage):
                    runner.game.post(AcquisitionFailed(message.error))
                    report = runner.tick(None, message.timestamp)
                    await websocket.send_json({'type': 'report', 'data': report_to_dict(report)})

                elif isinstance(message, StopMessage):
                    await runner.stop()
                    await websocket.send_json({'type': 'stopped', 'data': {'game': game}})

        except WebSocketDisconnect:
            logger.info("Client disconnected from %s", game)
        finally:
            active_sessions.pop(session_id, None)
            await runner.stop()

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "active_sessions": len(active_sessions),
            "games": sorted(GAMES),
        }

    return app


def main():
    import uvicorn

    cfg = load_config()
    logging.basicConfig(level=getattr(logging, cfg.logging.level))
    uvicorn.run(create_app(cfg), host=cfg.server.host, port=cfg.server.port)


if __name__ == "__main__":
    main()
