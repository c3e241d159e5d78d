"""
Suivi des dispatches d'événements (outil de debug).
Accumule un enregistrement par broadcast et l'écrit dans un fichier texte,
groupé par frame, à l'arrêt du dispatcher.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from eventdispatcher import settings
from eventdispatcher.core.params import ParamList

logger = logging.getLogger(__name__)


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


@dataclass
class EventDispatchInfo:
    """
    Trace d'un dispatch.

    event_param est partagé avec l'appelant, pas copié.
    """
    event_name: str
    dispatch_time: float
    dispatch_frame: int
    binding_count: int
    event_param: Optional[ParamList] = None


class EventDispatchTracker:
    """
    Accumulateur d'EventDispatchInfo.

    Pas de limite de taille sur une session.
    """

    def __init__(self) -> None:
        self._infos: List[EventDispatchInfo] = []

    @property
    def infos(self) -> List[EventDispatchInfo]:
        return list(self._infos)

    def add_event_dispatch_info(self, info: EventDispatchInfo) -> None:
        self._infos.append(info)

    def record(self, event_name: str, dispatch_time: float, dispatch_frame: int,
               binding_count: int, event_param: Optional[ParamList] = None) -> EventDispatchInfo:
        """Crée et ajoute un enregistrement."""
        info = EventDispatchInfo(
            event_name=event_name,
            dispatch_time=dispatch_time,
            dispatch_frame=dispatch_frame,
            binding_count=binding_count,
            event_param=event_param,
        )
        self.add_event_dispatch_info(info)
        return info

    def clear_event_dispatch_infos(self) -> None:
        self._infos.clear()

    def log_event_dispatch_infos(self, log_dir: Optional[Path] = None,
                                 file_name: Optional[str] = None) -> Path:
        """
        Écrit le log complet, en écrasant le précédent.

        Args:
            log_dir: Dossier de sortie (défaut: settings.LOG_FILE_DIR), créé si absent
            file_name: Nom du fichier (défaut: settings.LOG_FILE_NAME)

        Returns:
            Chemin du fichier écrit
        """
        log_dir = Path(log_dir or settings.LOG_FILE_DIR)
        full_path = log_dir / (file_name or settings.LOG_FILE_NAME)

        log_content = self.format_event_dispatch_infos()

        log_dir.mkdir(parents=True, exist_ok=True)

        # Écriture atomique: fichier temporaire dans le même dossier puis remplacement
        fd, tmp_path = tempfile.mkstemp(prefix=".dispatch_", suffix=".tmp", dir=log_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(log_content)
            # mkstemp crée en 0600: mêmes droits qu'une écriture classique
            os.chmod(tmp_path, 0o666 & ~_current_umask())
            os.replace(tmp_path, full_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.info(f"Event dispatch log written: {full_path} ({len(self._infos)} dispatches)")
        return full_path

    def flush(self, log_dir: Optional[Path] = None) -> Optional[Path]:
        """
        Écrit le log puis vide les enregistrements.

        Les erreurs (écriture, encodage, rendu des paramètres) sont loggées,
        jamais propagées.
        """
        path = None
        try:
            path = self.log_event_dispatch_infos(log_dir)
        except Exception:
            logger.exception("Could not write event dispatch log")
        finally:
            self.clear_event_dispatch_infos()
        return path

    # --- Formatage ---

    def _format_header(self) -> str:
        return (f"Event Dispatch Log - {datetime.now():%Y-%m-%d %H:%M:%S}"
                "\n----------------------------------------\n")

    def _format_frame_separator(self, frame: int) -> str:
        return f"--- Frame {frame} ---------------\n"

    def _format_event_dispatch_info(self, info: EventDispatchInfo) -> str:
        output = f"Time: {info.dispatch_time} | Event: {info.event_name} | Bindings : {info.binding_count}"

        if info.event_param is None:
            return output + "\n"

        return output + f" | Params: {info.event_param}\n"

    def format_event_dispatch_infos(self) -> str:
        """Rend tous les enregistrements, avec un séparateur à chaque changement de frame."""
        log_content = self._format_header()

        current_frame = 0
        for info in self._infos:
            if info.dispatch_frame != current_frame:
                current_frame = info.dispatch_frame
                log_content += self._format_frame_separator(current_frame)

            log_content += self._format_event_dispatch_info(info)

        return log_content
