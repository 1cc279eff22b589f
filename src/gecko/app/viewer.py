from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

import pygame

from ..sim.core.config import SimulationConfig
from ..sim.core.world import World
from ..sim.types.snapshot import Snapshot

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
YELLOW = (255, 255, 0)

# Body outline radius per segment index, head first.
SEGMENT_RADII: Tuple[float, ...] = (17, 13, 19, 23, 18, 15, 9, 7, 5, 4, 3, 3, 3, 3, 2)
FOOT_RADIUS = 10
VECTOR_SCALE = 10.0


def segment_radius(index: int) -> float:
    if 0 <= index < len(SEGMENT_RADII):
        return SEGMENT_RADII[index]
    return 0.0


def _circle(surface: pygame.Surface, fill: Optional[Sequence[int]], center: Tuple[float, float], radius: float) -> None:
    if radius <= 0:
        return
    if fill is not None:
        pygame.draw.circle(surface, fill, center, radius)
    pygame.draw.circle(surface, BLACK, center, radius, 1)


def draw_snapshot(surface: pygame.Surface, snapshot: Snapshot) -> None:
    surface.fill(WHITE)
    segments = snapshot.segments
    for entry in segments:
        index = entry["index"]
        position = (entry["x"], entry["y"])
        legs = entry["legs"]
        for leg in legs:
            _circle(surface, BLUE, leg["step_target"], FOOT_RADIUS)
            _circle(surface, GREEN if leg["stepping"] else RED, leg["foot"], FOOT_RADIUS)
            pygame.draw.line(surface, BLACK, position, leg["joint"])
            pygame.draw.line(surface, BLACK, leg["joint"], leg["foot"])
        _circle(surface, YELLOW if legs else None, position, segment_radius(index))
        if index > 0:
            leader = segments[index - 1]
            pygame.draw.line(surface, BLACK, (leader["x"], leader["y"]), position)

    if not segments:
        return
    head = pygame.math.Vector2(segments[0]["x"], segments[0]["y"])
    pygame.draw.line(surface, GREEN, head, head + pygame.math.Vector2(snapshot.velocity) * VECTOR_SCALE)
    for force in snapshot.forces:
        pygame.draw.line(surface, RED, head, head + pygame.math.Vector2(force) * VECTOR_SCALE)


def run_viewer(config: SimulationConfig) -> None:
    pygame.init()
    try:
        screen = pygame.display.set_mode((int(config.world_width), int(config.world_height)))
        pygame.display.set_caption("Gecko")
        clock = pygame.time.Clock()
        world = World(config)
        logger.info("viewer started at %d fps", config.frame_rate)
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_r:
                    world.reset()
            world.update(pygame.mouse.get_pos())
            draw_snapshot(screen, world.snapshot())
            pygame.display.flip()
            clock.tick(config.frame_rate)
        logger.info("viewer closed after %d ticks", world.tick)
    finally:
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Interactive gecko viewer (the gecko follows the mouse)")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    run_viewer(config)


if __name__ == "__main__":
    main()
