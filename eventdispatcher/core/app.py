"""
Application hôte de démonstration du dispatcher.
Boucle pygame: chaque frame avance le planificateur (broadcasts différés)
et l'horloge utilisée par le suivi des dispatches.
"""

import logging
from typing import List, Optional

import pygame

from eventdispatcher.settings import (
    WINDOW_SIZE, FPS, APP_TITLE, DEMO_DELAY_SECONDS, BLACK, WHITE, GRAY, YELLOW
)
from eventdispatcher.core.dispatcher import EventDispatcher
from eventdispatcher.core.params import ParamList
from eventdispatcher.core.scheduler import Scheduler, scheduler as default_scheduler

logger = logging.getLogger(__name__)

# Événements de la démo
SCORE_EVENT = "Score"
QUIT_EVENT = "Quit"


class DispatcherApp:
    """
    Boucle principale: SPACE diffuse Score, D programme un Score différé,
    P met le temps de jeu en pause, ESC quitte.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None,
                 dispatcher: Optional[EventDispatcher] = None):
        self.running = False
        self.clock = pygame.time.Clock()
        self.screen: Optional[pygame.Surface] = None
        self.font: Optional[pygame.font.Font] = None

        scheduler = scheduler or default_scheduler
        self.dispatcher = EventDispatcher.attach(
            dispatcher or EventDispatcher(scheduler=scheduler)
        )
        # L'instance partagée peut déjà exister avec son propre planificateur
        self.scheduler = self.dispatcher.scheduler

        # État de la démo
        self.score = 0
        self.messages: List[str] = []

        logger.info("DispatcherApp instance created")

    def initialize(self) -> bool:
        """
        Initialise pygame et lie les listeners de la démo.

        Returns:
            True si l'initialisation a réussi
        """
        try:
            pygame.init()
            self.screen = pygame.display.set_mode(WINDOW_SIZE)
            pygame.display.set_caption(APP_TITLE)
            self.font = pygame.font.Font(None, 24)
        except pygame.error as e:
            logger.error(f"Failed to initialize pygame: {e}")
            return False

        self.bind_listeners()
        logger.info("DispatcherApp initialized successfully")
        return True

    def bind_listeners(self) -> None:
        self.dispatcher.bind(SCORE_EVENT, self._on_score)
        self.dispatcher.bind(QUIT_EVENT, self._on_quit)

    def _on_score(self, params: ParamList) -> None:
        points = params.get("points", int, 0)
        self.score += points
        self._push_message(f"Score +{points} -> {self.score}")

    def _on_quit(self, params: ParamList) -> None:
        self.running = False

    def _push_message(self, text: str) -> None:
        self.messages.append(text)
        del self.messages[:-5]

    def run(self) -> None:
        """Lance la boucle principale."""
        if not self.initialize():
            logger.error("Failed to initialize, exiting")
            return

        self.running = True
        logger.info("Starting main loop")

        try:
            while self.running:
                dt = self.clock.tick(FPS) / 1000.0

                self._handle_events()
                self.update(dt)
                self._draw()

                pygame.display.flip()
        finally:
            self._cleanup()

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit()
                return
            if event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def handle_key(self, key: int) -> None:
        if key == pygame.K_SPACE:
            self.dispatcher.broadcast(SCORE_EVENT, ParamList("points", 10))
        elif key == pygame.K_d:
            self.dispatcher.broadcast_delayed(SCORE_EVENT, ParamList("points", 50), DEMO_DELAY_SECONDS)
            self._push_message(f"Score +50 in {DEMO_DELAY_SECONDS:.1f}s")
        elif key == pygame.K_p:
            if self.scheduler.clock.is_paused:
                self.scheduler.clock.resume()
            else:
                self.scheduler.clock.pause()
        elif key == pygame.K_ESCAPE:
            self.dispatcher.broadcast(QUIT_EVENT)

    def update(self, dt: float) -> None:
        """Avance d'une frame: horloge puis broadcasts différés arrivés à échéance."""
        self.scheduler.update(dt)

    def _draw(self) -> None:
        if not self.screen or not self.font:
            return

        self.screen.fill(BLACK)

        lines = [
            (f"Score: {self.score}", WHITE),
            (f"Bound events: {self.dispatcher.get_num_bound()}"
             f" | Pending delayed: {self.scheduler.pending_count}", GRAY),
            (f"{self.scheduler.clock}", GRAY),
            ("SPACE: broadcast  D: delayed  P: pause  ESC: quit", YELLOW),
        ]
        lines += [(message, WHITE) for message in self.messages]

        for i, (text, color) in enumerate(lines):
            self.screen.blit(self.font.render(text, True, color), (16, 16 + i * 28))

    def _cleanup(self) -> None:
        """Détruit le dispatcher (écrit le log des dispatches) puis ferme pygame."""
        logger.info("Cleaning up...")
        EventDispatcher.shutdown()
        pygame.quit()
        logger.info("Cleanup complete")

    def quit(self) -> None:
        self.running = False
        logger.info("Quit requested")
