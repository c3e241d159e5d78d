"""
Horloge de frame de l'hôte.
Compte les frames et accumule le temps de jeu (mis à l'échelle) et le temps réel.
"""

import logging

logger = logging.getLogger(__name__)


class FrameClock:
    """
    Horloge avancée une fois par frame par la boucle principale.

    time suit time_scale (0.0 = pause du temps de jeu),
    realtime avance toujours du delta réel.
    """

    def __init__(self, time_scale: float = 1.0):
        """
        Args:
            time_scale: Facteur appliqué au delta pour le temps de jeu
        """
        self.time_scale = time_scale
        self.frame_count = 0
        self.time = 0.0
        self.realtime = 0.0

    def tick(self, dt: float) -> None:
        """
        Avance d'une frame.

        Args:
            dt: Temps réel écoulé depuis la frame précédente (secondes)
        """
        if dt < 0:
            logger.warning(f"Negative frame delta ignored: {dt}")
            dt = 0.0

        self.frame_count += 1
        self.realtime += dt
        self.time += dt * self.time_scale

    def pause(self) -> None:
        """Gèle le temps de jeu (le temps réel continue)."""
        self.time_scale = 0.0
        logger.info("FrameClock paused")

    def resume(self, time_scale: float = 1.0) -> None:
        self.time_scale = time_scale
        logger.info(f"FrameClock resumed (scale: {time_scale})")

    @property
    def is_paused(self) -> bool:
        return self.time_scale == 0.0

    def reset(self) -> None:
        """Remet les compteurs à zéro."""
        self.frame_count = 0
        self.time = 0.0
        self.realtime = 0.0
        logger.info("FrameClock reset")

    def __str__(self) -> str:
        return f"FrameClock(frame={self.frame_count}, time={self.time:.3f}, realtime={self.realtime:.3f})"
