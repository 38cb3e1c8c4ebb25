"""
Integration test to verify all components can be imported and work together.
"""
import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from gesture_arcade.capture import CaptureManager, RemoteCapture
from gesture_arcade.config import load_config
from gesture_arcade.content import ContentProviderProto, MockContentProvider
from gesture_arcade.games import GAMES, GamePhase
from gesture_arcade.gestures import GestureSession
from gesture_arcade.runner import GameRunner
from gesture_arcade.types import FrameResult, Hand, Landmark


def flat_hand(handedness="Right"):
    """Open hand facing the camera, fingers pointing up."""
    points = [(0.5, 0.9)]
    points += [(0.42, 0.8), (0.39, 0.75), (0.36, 0.7), (0.33, 0.65)]
    for x in (0.455, 0.485, 0.515, 0.545):
        points += [(x, 0.7), (x, 0.6), (x, 0.55), (x, 0.5)]
    return Hand([Landmark(x, y) for x, y in points], handedness)


async def test_integration():
    """Test that all components can be imported and used together."""
    print("Testing integration of gesture arcade components...")

    # Test 1: Load configuration
    print("\n1. Testing configuration loading...")
    try:
        config = load_config()
        print("✓ Config loaded successfully")
        print(f"  Camera: {config.camera.width}x{config.camera.height} @ {config.camera.fps}fps")
        print(f"  Classifier: {config.classifier.strategy} strategy")
        print(f"  Hold: {config.hold.duration_s}s")
    except Exception as e:
        print(f"✗ Config loading failed: {e}")
        return False

    # Test 2: Gesture pipeline
    print("\n2. Testing gesture session...")
    session = GestureSession.from_config(config, roles=("primary",))
    report = session.process_frame(FrameResult([flat_hand()]), now=0.0)
    print(f"✓ Raised fingers: {report.total_raised}, gesture: {report.gesture}")
    print(f"  Bindings: {report.bindings}")

    # Test 3: Mock content provider
    print("\n3. Testing mock content provider...")
    provider = MockContentProvider(seed=42)
    assert isinstance(provider, ContentProviderProto)
    problem = await provider.math_problem(0, [])
    print(f"✓ MockContentProvider implements ContentProviderProto: {problem.problem}")

    # Test 4: Every game starts and reaches play
    print("\n4. Testing games...")
    for name, game_cls in GAMES.items():
        game = game_cls(config, captures=CaptureManager(), opener=RemoteCapture)
        runner = GameRunner(game, MockContentProvider(seed=1))
        if not runner.start(0.0):
            print(f"✗ {name} failed to start: {game.error}")
            return False
        runner.tick(None, 0.0)
        await runner.drain()
        report = runner.tick(FrameResult([flat_hand()]), 0.1)
        await runner.stop()
        if report.phase is GamePhase.IDLE:
            print(f"✗ {name} stopped unexpectedly: {report.error}")
            return False
        print(f"✓ {name}: {report.phase.value}")

    print("\n🎉 All integration tests passed!")
    print("\nNext steps:")
    print("1. Install dependencies: pip install -r requirements.txt")
    print("2. Play a game: python -m gesture_arcade.main math_challenge")
    print("3. Or serve browser clients: python -m gesture_arcade.server")

    return True


if __name__ == "__main__":
    success = asyncio.run(test_integration())
    sys.exit(0 if success else 1)
