import logging
import os
import sys

import pygame

from world_weaver import controls, render
from world_weaver.config import load_config
from world_weaver.content import load_content
from world_weaver.settings import FPS, SCREEN_HEIGHT, SCREEN_WIDTH
from world_weaver.simulation import Simulation
from world_weaver.validation import validate_catalog

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "data"


class Game:
    def __init__(self, data_dir: str):
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.RESIZABLE)
        pygame.display.set_caption("World Weaver")
        self.clock = pygame.time.Clock()
        self.running = True

        catalog = load_content(data_dir)
        validate_catalog(catalog)
        self.sim = Simulation(catalog, load_config(data_dir), screen_size=(SCREEN_WIDTH, SCREEN_HEIGHT))

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                return
            if event.type == pygame.VIDEORESIZE:
                self.sim.resize(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                controls.key_down(self.sim, event.key)
            elif event.type == pygame.KEYUP:
                controls.key_up(self.sim, event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                controls.pointer_down(self.sim, *event.pos)

    def update(self, dt):
        self.sim.update(dt)

    def draw(self):
        render.draw(self.screen, self.sim)
        pygame.display.flip()

    def run(self):
        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self.handle_events()
            self.update(dt)
            self.draw()


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    data_dir = argv[0] if argv else DEFAULT_DATA_DIR
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if not os.path.isdir(data_dir):
        logger.warning("Data directory %s not found; starting with empty content", data_dir)
    pygame.init()
    game = Game(data_dir)
    game.run()
    pygame.quit()


if __name__ == "__main__":
    main()
