"""
Dispatcher d'événements par nom.
Les listeners sont liés à un nom d'événement puis appelés de façon synchrone,
dans l'ordre d'enregistrement, à chaque broadcast.

Une instance unique est partagée par le processus (EventDispatcher.instance()),
les fonctions du module (bind, broadcast, ...) passent par elle.
"""

import logging
import weakref
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from eventdispatcher import settings
from eventdispatcher.core.params import ParamList
from eventdispatcher.core.scheduler import ScheduledCall, Scheduler, scheduler as default_scheduler
from eventdispatcher.core.tracker import EventDispatchTracker

logger = logging.getLogger(__name__)

Listener = Callable[[ParamList], None]


class DispatcherState(Enum):
    """États du cycle de vie."""
    UNINITIALIZED = "uninitialized"  # Aucune instance créée
    ACTIVE = "active"
    DESTROYED = "destroyed"


class EventDispatcher:
    """
    Table nom d'événement -> liste ordonnée de listeners.

    Un même listener lié deux fois est appelé deux fois; unbind en retire une seule
    occurrence. Les listeners peuvent bind/unbind/broadcast pendant un broadcast:
    la diffusion en cours utilise la liste telle qu'elle était avant le premier appel.
    """

    # Instance partagée du processus
    _instance: Optional["EventDispatcher"] = None
    _released = False

    def __init__(self, scheduler: Optional[Scheduler] = None,
                 tracking: Optional[bool] = None,
                 tracker: Optional[EventDispatchTracker] = None,
                 log_dir: Optional[Path] = None):
        """
        Args:
            scheduler: Planificateur des broadcasts différés (défaut: planificateur global)
            tracking: Active le suivi des dispatches (défaut: settings.EVENT_DISPATCH_TRACKING)
            tracker: Tracker à utiliser, active le suivi
            log_dir: Dossier du log écrit à la destruction. Sans lui, seule
                     l'instance partagée écrit le log (settings.LOG_FILE_DIR)
        """
        self.bindings: Dict[str, List[Listener]] = {}
        self.scheduler = scheduler or default_scheduler

        if tracking is None:
            tracking = settings.EVENT_DISPATCH_TRACKING
        if tracker is None and tracking:
            tracker = EventDispatchTracker()
        self.tracker = tracker
        self.log_dir = log_dir

        self._pending_calls: "weakref.WeakSet[ScheduledCall]" = weakref.WeakSet()
        self.state = DispatcherState.ACTIVE

        logger.debug(f"EventDispatcher created (tracking: {self.tracker is not None})")

    # --- Instance partagée ---

    @classmethod
    def instance(cls) -> "EventDispatcher":
        """Retourne l'instance partagée, créée au premier accès."""
        if EventDispatcher._instance is None:
            cls.attach(cls())
        return EventDispatcher._instance

    @classmethod
    def attach(cls, dispatcher: "EventDispatcher") -> "EventDispatcher":
        """
        Installe un dispatcher comme instance partagée.

        Si une instance est déjà active, le nouveau venu se détruit et
        l'instance existante reste en place.

        Returns:
            L'instance partagée effective
        """
        current = EventDispatcher._instance
        if current is not None and current is not dispatcher:
            logger.warning("Destroying duplicate instance of EventDispatcher.")
            dispatcher.destroy(flush_log=False)
            return current

        if not dispatcher.is_active:
            logger.warning("Cannot attach a destroyed EventDispatcher, creating a new one")
            return cls.instance()

        EventDispatcher._instance = dispatcher
        logger.info("EventDispatcher attached")
        return dispatcher

    @classmethod
    def is_valid(cls) -> bool:
        return EventDispatcher._instance is not None

    @classmethod
    def accessor_state(cls) -> DispatcherState:
        """État de l'instance partagée."""
        if EventDispatcher._instance is not None:
            return DispatcherState.ACTIVE
        if EventDispatcher._released:
            return DispatcherState.DESTROYED
        return DispatcherState.UNINITIALIZED

    @classmethod
    def shutdown(cls) -> None:
        """Détruit l'instance partagée (vide les bindings, écrit le log)."""
        if EventDispatcher._instance is not None:
            EventDispatcher._instance.destroy()

    # --- Cycle de vie ---

    @property
    def is_active(self) -> bool:
        return self.state == DispatcherState.ACTIVE

    def destroy(self, flush_log: bool = True) -> None:
        """
        Vide les bindings, annule les broadcasts différés en attente,
        écrit puis libère le tracker. Sans effet si déjà détruit.

        Le log n'est écrit que par l'instance partagée, ou dans log_dir
        quand il a été fourni.

        Args:
            flush_log: Écrire le log des dispatches avant de libérer le tracker
        """
        if self.state == DispatcherState.DESTROYED:
            return

        is_shared = EventDispatcher._instance is self
        try:
            self.clear_all_bindings()

            for call in list(self._pending_calls):
                call.cancel()
            self._pending_calls.clear()

            if self.tracker is not None and flush_log and (is_shared or self.log_dir is not None):
                self.tracker.flush(self.log_dir)
        finally:
            self.tracker = None
            self.state = DispatcherState.DESTROYED

            if is_shared:
                EventDispatcher._instance = None
                EventDispatcher._released = True
                logger.info("EventDispatcher shut down")

    def _check_active(self, operation: str, event_name: str) -> bool:
        if self.state == DispatcherState.DESTROYED:
            logger.warning(f"EventDispatcher destroyed, {operation}('{event_name}') ignored")
            return False
        return True

    # --- Bindings ---

    def bind(self, event_name: str, listener: Listener) -> None:
        """Lie un listener à un événement, créé s'il n'existe pas."""
        if not self._check_active("bind", event_name):
            return

        self.bindings.setdefault(event_name, []).append(listener)
        logger.debug(f"Bound {listener!r} to '{event_name}'")

    def unbind(self, event_name: str, listener: Listener) -> None:
        """
        Retire une occurrence du listener (la plus récente).

        Sans effet si l'événement ou le listener est inconnu. L'événement
        reste connu même quand sa liste devient vide.
        """
        if not self._check_active("unbind", event_name):
            return

        listeners = self.bindings.get(event_name)
        if not listeners:
            return

        for index in range(len(listeners) - 1, -1, -1):
            if listeners[index] == listener:
                del listeners[index]
                logger.debug(f"Unbound {listener!r} from '{event_name}'")
                return

    def broadcast(self, event_name: str, params: Optional[ParamList] = None) -> None:
        """
        Appelle tous les listeners de l'événement, dans l'ordre d'enregistrement.

        Args:
            event_name: Nom de l'événement
            params: Paramètres transmis à chaque listener (ParamList vide si None)
        """
        if not self._check_active("broadcast", event_name):
            return

        listeners = self.bindings.get(event_name)

        # Compté avant les appels: un listener peut se retirer pendant la diffusion
        if self.tracker is not None:
            clock = self.scheduler.clock
            self.tracker.record(event_name, clock.realtime, clock.frame_count,
                                len(listeners) if listeners else 0, params)

        if listeners is None:
            return

        if not listeners:
            logger.warning(f"The event {event_name} does not have any listeners.")
            return

        if params is None:
            params = ParamList()

        for listener in list(listeners):
            try:
                listener(params)
            except Exception:
                logger.exception(f"Listener {listener!r} failed on event '{event_name}'")

    def broadcast_delayed(self, event_name: str, params: Optional[ParamList] = None,
                          delay: float = 0.0, realtime: bool = False) -> Optional[ScheduledCall]:
        """
        Programme un broadcast après delay secondes, sans bloquer.

        L'appel en attente ne garde qu'une référence faible au dispatcher:
        s'il est détruit avant l'échéance, rien n'est diffusé.

        Args:
            event_name: Nom de l'événement
            params: Paramètres du broadcast
            delay: Délai en secondes
            realtime: Mesurer le délai en temps réel (ignore la pause du temps de jeu)

        Returns:
            Jeton d'annulation, ou None si le dispatcher est détruit
        """
        if not self._check_active("broadcast_delayed", event_name):
            return None

        dispatcher_ref = weakref.ref(self)

        def _delayed_broadcast() -> None:
            dispatcher = dispatcher_ref()
            if dispatcher is None or not dispatcher.is_active:
                logger.debug(f"Delayed broadcast of '{event_name}' dropped, dispatcher destroyed")
                return
            dispatcher.broadcast(event_name, params)

        call = self.scheduler.schedule(_delayed_broadcast, delay, realtime=realtime)
        self._pending_calls.add(call)
        return call

    def clear_all_bindings(self) -> None:
        if not self._check_active("clear_all_bindings", "*"):
            return
        self.bindings.clear()

    # --- Requêtes ---

    def get_bindings_count(self, event_name: str) -> int:
        return len(self.bindings.get(event_name, ()))

    def get_num_bound(self) -> int:
        """Nombre de noms d'événements connus (listes vides comprises)."""
        return len(self.bindings)

    def is_bound(self, event_name: str) -> bool:
        return event_name in self.bindings

    def has_binding(self, event_name: str, listener: Listener) -> bool:
        return listener in self.bindings.get(event_name, ())


# --- Accès global ---

def bind(event_name: str, listener: Listener) -> None:
    EventDispatcher.instance().bind(event_name, listener)


def unbind(event_name: str, listener: Listener) -> None:
    if not EventDispatcher.is_valid():
        return
    EventDispatcher.instance().unbind(event_name, listener)


def broadcast(event_name: str, params: Optional[ParamList] = None) -> None:
    EventDispatcher.instance().broadcast(event_name, params)


def broadcast_delayed(event_name: str, params: Optional[ParamList] = None,
                      delay: float = 0.0, realtime: bool = False) -> Optional[ScheduledCall]:
    return EventDispatcher.instance().broadcast_delayed(event_name, params, delay, realtime)


def clear_all_bindings() -> None:
    """Vide tous les bindings; sans effet si aucune instance n'existe."""
    if not EventDispatcher.is_valid():
        return
    EventDispatcher.instance().clear_all_bindings()


def get_bindings_count(event_name: str) -> int:
    return EventDispatcher.instance().get_bindings_count(event_name)


def get_num_bound() -> int:
    return EventDispatcher.instance().get_num_bound()


def is_bound(event_name: str) -> bool:
    return EventDispatcher.instance().is_bound(event_name)


def has_binding(event_name: str, listener: Listener) -> bool:
    return EventDispatcher.instance().has_binding(event_name, listener)
