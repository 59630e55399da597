"""
Replay Viewer
=============

Play back a recorded episode by re-running its actions.

Usage:
    python -m tools.replay_viewer replay.json [--speed 2.0]

Controls:
    SPACE       Play/Pause
    +/-         Speed up/slow down
    R           Restart
    ESC         Quit
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from stacker.stack_core.env_gym import StackerEnv
from stacker.stack_core.replay_recorder import compute_config_hash, load_replay


def view_replay(
    replay_path: str,
    width: int = 450,
    height: int = 600,
    speed: float = 1.0
) -> int:
    """
    Show a replay in a window.

    Returns:
        Exit code.
    """
    if not PYGAME_AVAILABLE:
        raise ImportError("pygame required for viewer: pip install pygame")

    data = load_replay(replay_path)
    actions = data["actions"]

    env = StackerEnv(
        render_mode="rgb_array",
        image_width=width,
        image_height=height,
        frame_skip=data.get("frame_skip", 1)
    )
    if data.get("config_hash") != compute_config_hash(env.config):
        print("Warning: replay was recorded with a different configuration")

    print(f"Replay: {Path(replay_path).name}")
    print(f"  Agent: {data.get('agent', 'unknown')}")
    print(f"  Steps: {len(actions)}")
    print(f"  Frame skip: {env.frame_skip}")
    print(f"  Final score: {data.get('final_score', 0)}")

    pygame.init()
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption(f"Replay - {Path(replay_path).name}")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 24)

    index = 0
    playing = True
    running = True
    info = {"score": 0}
    env.reset()

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    playing = not playing
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    speed = min(speed * 2, 32.0)
                elif event.key == pygame.K_MINUS:
                    speed = max(speed / 2, 0.25)
                elif event.key == pygame.K_r:
                    env.reset()
                    index = 0

        if playing and index < len(actions):
            steps = max(1, int(speed))
            for _ in range(steps):
                if index >= len(actions):
                    break
                _, _, terminated, truncated, info = env.step(actions[index])
                index += 1
                if terminated or truncated:
                    index = len(actions)

        frame = env.render()
        surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
        screen.blit(surface, (0, 0))

        status = f"Step {index}/{len(actions)}  Score {info.get('score', 0)}  x{speed:g}"
        if not playing:
            status += "  [paused]"
        screen.blit(font.render(status, True, (240, 240, 240)), (10, 10))

        pygame.display.flip()
        clock.tick(int(60 * min(speed, 1.0)) or 15)

    env.close()
    pygame.quit()
    return 0


def main():
    parser = argparse.ArgumentParser(description="View a recorded Stacker replay")
    parser.add_argument("replay", type=str, help="Path to replay JSON file")
    parser.add_argument("--width", type=int, default=450, help="Window width (default: 450)")
    parser.add_argument("--height", type=int, default=600, help="Window height (default: 600)")
    parser.add_argument("--speed", type=float, default=1.0, help="Initial playback speed")

    args = parser.parse_args()

    try:
        return view_replay(args.replay, args.width, args.height, args.speed)
    except (ImportError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
