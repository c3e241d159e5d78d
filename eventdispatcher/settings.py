from pathlib import Path
import os
from typing import Tuple

# === FENÊTRE DE DÉMO ===
WIDTH = 640
HEIGHT = 360
FPS = 60

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
GRAY = (128, 128, 128)
YELLOW = (255, 255, 0)

APP_TITLE = "Event Dispatcher"

# Configuration de la fenêtre
WINDOW_SIZE: Tuple[int, int] = (WIDTH, HEIGHT)

# === DISPATCHER ===
# Configuration de développement
DEV_MODE = os.getenv("DEV_MODE", "True").lower() == "true"

# Suivi des dispatches (remplace l'ancien suivi "éditeur uniquement")
EVENT_DISPATCH_TRACKING = os.getenv("EVENT_DISPATCH_TRACKING", str(DEV_MODE)).lower() == "true"

# Fichier de log des dispatches, écrasé à chaque session
LOG_FILE_DIR = Path(os.getenv("EVENT_DISPATCH_LOG_DIR", "logs"))
LOG_FILE_NAME = "EventDispatchLog.txt"

# Délai utilisé par la démo pour broadcast_delayed (secondes)
DEMO_DELAY_SECONDS = float(os.getenv("DEMO_DELAY_SECONDS", "2.0"))
