"""
Configuration pytest pour le dispatcher d'événements.
Fixtures communes et isolation de l'instance partagée.
"""

import os
import sys
from pathlib import Path

import pytest

# Ajouter la racine du projet au path pour les imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# pygame sans fenêtre ni audio
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from eventdispatcher import settings
from eventdispatcher.core.dispatcher import EventDispatcher
from eventdispatcher.core.params import ParamList
from eventdispatcher.core.scheduler import Scheduler, scheduler as default_scheduler


@pytest.fixture(autouse=True)
def isolated_dispatcher(monkeypatch, tmp_path):
    """Instance partagée vierge et log redirigé vers tmp_path pour chaque test."""
    monkeypatch.setattr(settings, "LOG_FILE_DIR", tmp_path / "log")
    monkeypatch.setattr(EventDispatcher, "_instance", None)
    monkeypatch.setattr(EventDispatcher, "_released", False)
    yield
    EventDispatcher.shutdown()
    default_scheduler.clear()


@pytest.fixture
def scheduler():
    """Planificateur avec sa propre horloge."""
    return Scheduler()


@pytest.fixture
def dispatcher(scheduler):
    """Dispatcher autonome avec suivi activé."""
    return EventDispatcher(scheduler=scheduler, tracking=True)


@pytest.fixture
def recorder():
    """Listener qui garde les paramètres reçus."""
    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, params: ParamList) -> None:
            self.calls.append(params)

    return Recorder()
