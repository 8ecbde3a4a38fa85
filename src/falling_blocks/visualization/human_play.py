from __future__ import annotations

import argparse
import logging
from typing import Dict

import pygame

from falling_blocks.game import Action, GameConfig, GameController
from falling_blocks.leaderboard import JsonFileLeaderboard
from .renderer import Renderer

logger = logging.getLogger(__name__)


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
}

MAX_NAME_LENGTH = 20


def _is_reset(event, entering_name: bool) -> bool:
    # R restarts at any time; while typing a name it needs Ctrl so the letter can be entered
    if event.key != pygame.K_r:
        return False
    return not entering_name or bool(event.mod & pygame.KMOD_CTRL)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--interval_ms", type=int, default=1000, help="Automatic drop interval")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--leaderboard", type=str, default="./leaderboard.json")
    p.add_argument("--cell_size", type=int, default=32)
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def run() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    config = GameConfig(args.width, args.height, args.interval_ms, args.seed)
    pygame.init()
    try:
        controller = GameController(config, leaderboard=JsonFileLeaderboard(args.leaderboard),
                                    clock=pygame.time.get_ticks)
        clock = pygame.time.Clock()
        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("Falling Blocks")

        name = ""
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type != pygame.KEYDOWN:
                    continue
                elif event.key == pygame.K_ESCAPE:
                    running = False
                elif _is_reset(event, controller.session.game_over and not controller.score_submitted):
                    controller.reset()
                    name = ""
                elif not controller.session.game_over:
                    action = KEY_TO_ACTION.get(event.key)
                    if action is not None:
                        controller.handle(action)
                elif not controller.score_submitted:
                    # Name entry: Enter submits, Tab skips
                    if event.key == pygame.K_RETURN and name.strip():
                        controller.submit_score(name)
                        if controller.score_submitted:
                            name = ""
                    elif event.key == pygame.K_TAB:
                        controller.skip_submission()
                    elif event.key == pygame.K_BACKSPACE:
                        name = name[:-1]
                    elif event.unicode and event.unicode.isprintable() and len(name) < MAX_NAME_LENGTH:
                        name += event.unicode

            controller.update()

            if not controller.session.game_over:
                prompt = ""
            elif not controller.score_submitted:
                prompt = f"Name: {name}_  (Enter to save, Tab to skip)"
                if controller.save_error:
                    prompt = f"Save failed, try again. {prompt}"
            else:
                prompt = f"Score {controller.final_score} - press R to restart"
            renderer.draw(screen, controller.snapshot(), controller.leaderboard_entries, prompt)

            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
