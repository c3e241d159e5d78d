"""
Appels différés pilotés par la boucle de frames.
Équivalent non bloquant d'une coroutine "attendre N secondes puis agir":
la boucle principale appelle update(dt) à chaque frame.
"""

import heapq
import itertools
import logging
from typing import Any, Callable, List, Optional, Tuple

from eventdispatcher.core.timer import FrameClock

logger = logging.getLogger(__name__)


class ScheduledCall:
    """
    Appel en attente, sert aussi de jeton d'annulation.
    """

    def __init__(self, callback: Callable[[], Any], due_time: float,
                 realtime: bool = False):
        self.callback = callback
        self.due_time = due_time
        self.realtime = realtime
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not self.cancelled and not self.fired

    def cancel(self) -> bool:
        """
        Annule l'appel s'il n'a pas encore eu lieu.

        Returns:
            True si l'appel était encore en attente
        """
        if not self.active:
            return False
        self.cancelled = True
        return True

    def __repr__(self) -> str:
        state = "fired" if self.fired else "cancelled" if self.cancelled else "pending"
        return f"ScheduledCall(due={self.due_time:.3f}, realtime={self.realtime}, {state})"


class Scheduler:
    """
    File d'appels différés triée par échéance.

    Deux files: temps de jeu (FrameClock.time) et temps réel (FrameClock.realtime).
    """

    def __init__(self, clock: Optional[FrameClock] = None):
        self.clock = clock or FrameClock()
        self._queues: dict[bool, List[Tuple[float, int, ScheduledCall]]] = {False: [], True: []}
        self._counter = itertools.count()

    def schedule(self, callback: Callable[[], Any], delay: float,
                 realtime: bool = False) -> ScheduledCall:
        """
        Programme un appel après delay secondes, sans bloquer.

        Args:
            callback: Fonction sans argument à appeler
            delay: Délai en secondes (négatif ramené à 0)
            realtime: Mesurer sur le temps réel plutôt que le temps de jeu

        Returns:
            Jeton ScheduledCall
        """
        delay = max(0.0, float(delay))
        now = self.clock.realtime if realtime else self.clock.time
        call = ScheduledCall(callback, now + delay, realtime=realtime)
        heapq.heappush(self._queues[realtime], (call.due_time, next(self._counter), call))
        logger.debug(f"Scheduled call in {delay:.3f}s ({'real' if realtime else 'game'} time)")
        return call

    def update(self, dt: float) -> int:
        """
        Avance l'horloge d'une frame puis exécute les appels arrivés à échéance.

        Chaque file est exécutée dans l'ordre de ses échéances, la file du temps
        de jeu avant celle du temps réel: les deux horloges ne sont pas comparables.
        Les appels programmés pendant cette mise à jour attendent la suivante.

        Args:
            dt: Temps réel écoulé depuis la frame précédente (secondes)

        Returns:
            Nombre d'appels exécutés
        """
        self.clock.tick(dt)

        due = self._pop_due(False, self.clock.time) + self._pop_due(True, self.clock.realtime)

        executed = 0
        for _, _, call in due:
            if not call.active:
                continue
            call.fired = True
            try:
                call.callback()
            except Exception:
                logger.exception(f"Scheduled call failed: {call!r}")
            executed += 1

        return executed

    def _pop_due(self, realtime: bool, now: float) -> List[Tuple[float, int, ScheduledCall]]:
        queue = self._queues[realtime]
        due = []
        while queue and queue[0][0] <= now:
            due.append(heapq.heappop(queue))
        return due

    def cancel(self, call: ScheduledCall) -> bool:
        return call.cancel()

    def cancel_all(self) -> int:
        """
        Annule tous les appels en attente.

        Returns:
            Nombre d'appels annulés
        """
        cancelled = 0
        for queue in self._queues.values():
            for _, _, call in queue:
                if call.cancel():
                    cancelled += 1
            queue.clear()
        if cancelled:
            logger.debug(f"Cancelled {cancelled} scheduled call(s)")
        return cancelled

    @property
    def pending_count(self) -> int:
        return sum(1 for queue in self._queues.values() for _, _, call in queue if call.active)

    def clear(self) -> None:
        """Annule tout et remet l'horloge à zéro."""
        self.cancel_all()
        self.clock.reset()


# Planificateur global, avancé par la boucle principale
scheduler = Scheduler()
