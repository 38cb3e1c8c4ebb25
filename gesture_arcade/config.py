"""
Configuration management for the gesture arcade.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

STRATEGIES = ("vertical", "angle")
THUMB_REFERENCES = ("mcp", "ip", "index_mcp")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int
    max_missed_reads: int  # consecutive failed reads before the camera counts as lost


@dataclass
class MediaPipeConfig:
    """MediaPipe Hand Landmarker configuration settings."""
    model_path: str
    model_url: str
    max_num_hands: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class ClassifierConfig:
    """Gesture classifier configuration."""
    strategy: str  # "vertical" or "angle"
    thumb_reference: str  # "mcp", "ip" or "index_mcp"
    extended_angle_deg: float
    curled_angle_deg: float
    pinch_threshold: float
    pinch_use_depth: bool
    ten_fingers_min: int


@dataclass
class SmoothingConfig:
    """Exponential smoothing configuration."""
    alpha: float


@dataclass
class HoldConfig:
    """Hold-to-confirm configuration."""
    duration_s: float


@dataclass
class MathChallengeConfig:
    problem_time_s: float
    hold_s: float


@dataclass
class QuizQuestConfig:
    thinking_time_s: float
    hold_s: float
    feedback_s: float
    max_options: int


@dataclass
class BubblePopConfig:
    problem_time_s: float
    feedback_s: float
    bubble_radius: float
    row_y: float


@dataclass
class SketchConfig:
    pencil_width: int
    eraser_min: float
    eraser_max: float
    eraser_span: float  # thumb-index distance mapped to eraser_max
    canvas_width: int
    canvas_height: int


@dataclass
class AirPianoConfig:
    lanes: int
    tap_zone: float  # normalized y below which a fingertip is in the tap zone
    hit_cooldown_s: float
    max_mistakes: int
    easy_s: float
    hard_s: float


@dataclass
class PingPongConfig:
    paddle_width: float
    paddle_height: float
    ball_radius: float
    ball_speed: float  # normalized units per second
    max_bounce_deg: float
    pause_hold_s: float


@dataclass
class GamesConfig:
    """Game controller configuration."""
    countdown_s: float
    feedback_s: float
    math_challenge: MathChallengeConfig
    quiz_quest: QuizQuestConfig
    bubble_pop: BubblePopConfig
    sketch: SketchConfig
    air_piano: AirPianoConfig
    ping_pong: PingPongConfig


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    window_name: str


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass
class ServerConfig:
    """Websocket server configuration."""
    host: str
    port: int


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    classifier: ClassifierConfig
    smoothing: SmoothingConfig
    hold: HoldConfig
    games: GamesConfig
    display: DisplayConfig
    logging: LoggingConfig
    server: ServerConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data)


def _choice(value: str, allowed, name: str) -> str:
    if value not in allowed:
        raise ValueError(f"Invalid {name} {value!r}, expected one of {', '.join(allowed)}")
    return value


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps'],
        max_missed_reads=int(camera_data['max_missed_reads'])
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        model_path=mp_data['model_path'],
        model_url=mp_data['model_url'],
        max_num_hands=mp_data['max_num_hands'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    cls_data = data['classifier']
    classifier = ClassifierConfig(
        strategy=_choice(cls_data['strategy'], STRATEGIES, "classifier strategy"),
        thumb_reference=_choice(cls_data['thumb_reference'], THUMB_REFERENCES, "thumb reference"),
        extended_angle_deg=float(cls_data['extended_angle_deg']),
        curled_angle_deg=float(cls_data['curled_angle_deg']),
        pinch_threshold=float(cls_data['pinch_threshold']),
        pinch_use_depth=bool(cls_data['pinch_use_depth']),
        ten_fingers_min=int(cls_data['ten_fingers_min'])
    )

    alpha = float(data['smoothing']['alpha'])
    if not 0.0 < alpha <= 1.0:
        raise ValueError(f"smoothing.alpha must be in (0, 1], got {alpha}")
    smoothing = SmoothingConfig(alpha=alpha)

    hold = HoldConfig(duration_s=float(data['hold']['duration_s']))

    games_data = data['games']
    math_data = games_data['math_challenge']
    quiz_data = games_data['quiz_quest']
    bubble_data = games_data['bubble_pop']
    sketch_data = games_data['sketch']
    piano_data = games_data['air_piano']
    pong_data = games_data['ping_pong']
    games = GamesConfig(
        countdown_s=float(games_data['countdown_s']),
        feedback_s=float(games_data['feedback_s']),
        math_challenge=MathChallengeConfig(
            problem_time_s=float(math_data['problem_time_s']),
            hold_s=float(math_data['hold_s'])
        ),
        quiz_quest=QuizQuestConfig(
            thinking_time_s=float(quiz_data['thinking_time_s']),
            hold_s=float(quiz_data['hold_s']),
            feedback_s=float(quiz_data['feedback_s']),
            max_options=int(quiz_data['max_options'])
        ),
        bubble_pop=BubblePopConfig(
            problem_time_s=float(bubble_data['problem_time_s']),
            feedback_s=float(bubble_data['feedback_s']),
            bubble_radius=float(bubble_data['bubble_radius']),
            row_y=float(bubble_data['row_y'])
        ),
        sketch=SketchConfig(
            pencil_width=int(sketch_data['pencil_width']),
            eraser_min=float(sketch_data['eraser_min']),
            eraser_max=float(sketch_data['eraser_max']),
            eraser_span=float(sketch_data['eraser_span']),
            canvas_width=int(sketch_data['canvas_width']),
            canvas_height=int(sketch_data['canvas_height'])
        ),
        air_piano=AirPianoConfig(
            lanes=int(piano_data['lanes']),
            tap_zone=float(piano_data['tap_zone']),
            hit_cooldown_s=float(piano_data['hit_cooldown_s']),
            max_mistakes=int(piano_data['max_mistakes']),
            easy_s=float(piano_data['easy_s']),
            hard_s=float(piano_data['hard_s'])
        ),
        ping_pong=PingPongConfig(
            paddle_width=float(pong_data['paddle_width']),
            paddle_height=float(pong_data['paddle_height']),
            ball_radius=float(pong_data['ball_radius']),
            ball_speed=float(pong_data['ball_speed']),
            max_bounce_deg=float(pong_data['max_bounce_deg']),
            pause_hold_s=float(pong_data['pause_hold_s'])
        )
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        window_name=display_data['window_name']
    )

    logging_cfg = LoggingConfig(
        level=_choice(str(data['logging']['level']).upper(), LOG_LEVELS, "log level")
    )

    server_data = data['server']
    server = ServerConfig(host=server_data['host'], port=int(server_data['port']))

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        classifier=classifier,
        smoothing=smoothing,
        hold=hold,
        games=games,
        display=display,
        logging=logging_cfg,
        server=server
    )
