"""
Arcade games built on the shared game controller.
"""
from typing import Dict, Type

from .air_piano import AirPiano
from .base import (
    AcquisitionFailed,
    ContentFailed,
    ContentReady,
    GameController,
    GamePhase,
    GameReport,
)
from .bubble_pop import BubblePop
from .math_challenge import MathChallenge
from .ping_pong import PingPong
from .quiz_quest import QuizQuest
from .sketch import SketchAndScore

GAMES: Dict[str, Type[GameController]] = {
    game.name: game
    for game in (MathChallenge, QuizQuest, BubblePop, SketchAndScore, AirPiano, PingPong)
}

__all__ = [
    "GAMES",
    "AcquisitionFailed",
    "AirPiano",
    "BubblePop",
    "ContentFailed",
    "ContentReady",
    "GameController",
    "GamePhase",
    "GameReport",
    "MathChallenge",
    "PingPong",
    "QuizQuest",
    "SketchAndScore",
]
