"""
Game content (problems, questions, shapes) and the providers that make it.

Real deployments plug a generative model in behind ``ContentProviderProto``;
``MockContentProvider`` produces deterministic local content instead.
"""
import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, runtime_checkable

import cv2
import numpy as np

from .errors import ContentError

logger = logging.getLogger(__name__)

SHAPES = ["circle", "square", "triangle", "star", "heart"]


@dataclass
class MathProblem:
    """Problem answered by raising fingers; the solution is in [0, 10]."""
    problem: str
    solution: int


@dataclass
class BubbleProblem:
    """Problem with 4-6 numeric options, one of which is correct."""
    problem: str
    options: List[int]
    correct_answer: int


@dataclass
class QuizQuestion:
    question: str
    options: List[str]
    correct_index: int


@dataclass
class ShapePrompt:
    shape: str


@dataclass
class DrawingVerdict:
    is_match: bool
    feedback: str


@dataclass
class ContentRequest:
    """A content fetch requested by a game; answered with a ContentReady/ContentFailed event."""
    kind: str  # "math", "bubbles", "quiz", "shape", "evaluate"
    score: int = 0
    past_scores: List[int] = field(default_factory=list)
    subjects: List[str] = field(default_factory=list)
    shape: Optional[str] = None
    drawing_png: Optional[bytes] = None


@runtime_checkable
class ContentProviderProto(Protocol):
    """Abstract protocol for content generators."""

    async def math_problem(self, score: int, past_scores: Sequence[int]) -> MathProblem:
        ...

    async def bubble_problem(self, score: int) -> BubbleProblem:
        ...

    async def quiz_question(self, score: int, subjects: Sequence[str]) -> QuizQuestion:
        ...

    async def shape_prompt(self) -> ShapePrompt:
        ...

    async def evaluate_drawing(self, shape: str, drawing_png: bytes) -> DrawingVerdict:
        ...


async def fulfill(provider: ContentProviderProto, request: ContentRequest):
    """Dispatch a ContentRequest to the matching provider call."""
    if request.kind == "math":
        return await provider.math_problem(request.score, request.past_scores)
    if request.kind == "bubbles":
        return await provider.bubble_problem(request.score)
    if request.kind == "quiz":
        return await provider.quiz_question(request.score, request.subjects)
    if request.kind == "shape":
        return await provider.shape_prompt()
    if request.kind == "evaluate":
        if request.shape is None or request.drawing_png is None:
            raise ContentError("Evaluation request without shape or drawing")
        return await provider.evaluate_drawing(request.shape, request.drawing_png)
    raise ContentError(f"Unknown content request kind: {request.kind!r}")


_QUIZ_BANK = {
    "General Knowledge": [
        ("How many days are in a week?", ["5", "6", "7", "8"], 2),
        ("Which colour do you get by mixing blue and yellow?", ["Green", "Purple", "Orange"], 0),
    ],
    "Science": [
        ("What planet is known as the Red Planet?", ["Venus", "Mars", "Jupiter", "Saturn"], 1),
        ("What gas do plants take in?", ["Oxygen", "Nitrogen", "Carbon dioxide"], 2),
    ],
    "History": [
        ("Who was the first person to walk on the Moon?",
         ["Yuri Gagarin", "Neil Armstrong", "Buzz Aldrin", "John Glenn"], 1),
    ],
    "Computers": [
        ("How many bits are in a byte?", ["4", "8", "16", "32"], 1),
    ],
}


class MockContentProvider:
    """Deterministic content generator that never leaves the process."""

    def __init__(self, seed: Optional[int] = None, latency_s: float = 0.0):
        self.rng = random.Random(seed)
        self.latency_s = latency_s
        self.call_count = 0

    async def _tick(self, what: str) -> None:
        self.call_count += 1
        logger.debug("[MockContentProvider] %s (call #%d)", what, self.call_count)
        if self.latency_s:
            await asyncio.sleep(self.latency_s)

    async def math_problem(self, score: int, past_scores: Sequence[int]) -> MathProblem:
        await self._tick("math_problem")
        # harder operations once the player is doing well
        ops = ["+", "-"] if score < 3 else ["+", "-", "*", "/"]
        op = self.rng.choice(ops)
        if op == "+":
            a = self.rng.randint(0, 10)
            b = self.rng.randint(0, 10 - a)
            solution = a + b
        elif op == "-":
            a = self.rng.randint(0, 10)
            b = self.rng.randint(0, a)
            solution = a - b
        elif op == "*":
            a = self.rng.randint(1, 5)
            b = self.rng.randint(0, 10 // a)
            solution = a * b
        else:
            solution = self.rng.randint(1, 10)
            b = self.rng.randint(1, 5)
            a = solution * b
        return MathProblem(problem=f"What is {a} {op} {b}?", solution=solution)

    async def bubble_problem(self, score: int) -> BubbleProblem:
        await self._tick("bubble_problem")
        scale = 10 + 10 * score
        a = self.rng.randint(1, scale)
        b = self.rng.randint(1, scale)
        answer = a + b
        options = {answer}
        count = self.rng.randint(4, 6)
        while len(options) < count:
            options.add(max(0, answer + self.rng.randint(-9, 9)))
        ordered = sorted(options)
        self.rng.shuffle(ordered)
        return BubbleProblem(problem=f"{a} + {b} = ?", options=ordered, correct_answer=answer)

    async def quiz_question(self, score: int, subjects: Sequence[str]) -> QuizQuestion:
        await self._tick("quiz_question")
        known = [s for s in subjects if s in _QUIZ_BANK] or ["General Knowledge"]
        question, options, correct = self.rng.choice(_QUIZ_BANK[self.rng.choice(known)])
        return QuizQuestion(question=question, options=list(options), correct_index=correct)

    async def shape_prompt(self) -> ShapePrompt:
        await self._tick("shape_prompt")
        return ShapePrompt(shape=self.rng.choice(SHAPES))

    async def evaluate_drawing(self, shape: str, drawing_png: bytes) -> DrawingVerdict:
        await self._tick("evaluate_drawing")
        image = cv2.imdecode(np.frombuffer(drawing_png, np.uint8), cv2.IMREAD_GRAYSCALE)
        if image is None:
            raise ContentError("Drawing is not a decodable image")
        ink = float(np.count_nonzero(image < 128)) / image.size
        if ink < 0.002:
            return DrawingVerdict(False, "The canvas is empty, draw something first!")
        if ink > 0.5:
            return DrawingVerdict(False, f"That is mostly scribble, not a {shape}.")
        return DrawingVerdict(True, f"Nice {shape}!")
