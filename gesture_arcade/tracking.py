"""
Sticky hand tracking: binds logical roles to handedness labels across frames.

Hand order inside a frame is not stable, so roles are locked to the
classification label ("Left"/"Right") rather than to an array position.
A lock survives frames where its hand is missing and is only dropped when a
frame contains no hands at all.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Set, Union

from .types import FrameResult, Hand

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Role:
    """A logical hand role. ``target`` None means "whichever labeled hand shows up first"."""
    name: str
    target: Optional[str] = None


def opposite(label: str) -> str:
    return "Left" if label == "Right" else "Right"


class HandIdentityResolver:
    """Resolves each role to at most one detected hand per frame."""

    def __init__(self, roles: Iterable[Union[Role, str]]):
        self.roles = [role if isinstance(role, Role) else Role(role) for role in roles]
        names = [role.name for role in self.roles]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate role names: {names}")
        self.bindings: Dict[str, Optional[str]] = {role.name: None for role in self.roles}

    def resolve_indices(self, frame: Optional[FrameResult]) -> Dict[str, Optional[int]]:
        """
        Resolve every role to an index into ``frame.hands`` (or None).

        No detected hand is handed to two roles within one frame.
        """
        resolved: Dict[str, Optional[int]] = {role.name: None for role in self.roles}
        if frame is None or frame.empty:
            self._clear()
            return resolved

        claimed: Set[int] = set()

        # Locked roles keep their label, wherever that hand sits in the list.
        for role in self.roles:
            label = self.bindings[role.name]
            if label is None:
                continue
            idx = self._find(frame, label, claimed)
            if idx is not None:
                resolved[role.name] = idx
                claimed.add(idx)

        for role in self.roles:
            if self.bindings[role.name] is not None:
                continue
            taken = {label for label in self.bindings.values() if label is not None}
            for idx, hand in enumerate(frame.hands):
                label = hand.handedness
                if idx in claimed or label is None or label in taken:
                    continue
                if role.target is not None and label != role.target:
                    continue
                self.bindings[role.name] = label
                resolved[role.name] = idx
                claimed.add(idx)
                logger.info("Role %r locked to %s hand", role.name, label)
                break

        return resolved

    def resolve(self, frame: Optional[FrameResult]) -> Dict[str, Optional[Hand]]:
        """Resolve every role to its hand for this frame (None when absent)."""
        indices = self.resolve_indices(frame)
        return {
            name: (frame.hands[idx] if idx is not None else None)
            for name, idx in indices.items()
        }

    def reset(self) -> None:
        """Drop all locks (new game)."""
        for name in self.bindings:
            self.bindings[name] = None

    def _clear(self) -> None:
        locked = [name for name, label in self.bindings.items() if label is not None]
        if locked:
            logger.info("All hands lost, unlocking roles %s", locked)
        self.reset()

    @staticmethod
    def _find(frame: FrameResult, label: str, claimed: Set[int]) -> Optional[int]:
        for idx, hand in enumerate(frame.hands):
            if idx not in claimed and hand.handedness == label:
                return idx
        return None
