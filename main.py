"""
Point d'entrée de la démo du dispatcher d'événements.
"""

import logging

from eventdispatcher.core.app import DispatcherApp

# Configuration du logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Lance l'application de démo."""
    logger.info("Starting Event Dispatcher demo")
    app = DispatcherApp()
    app.run()


if __name__ == "__main__":
    main()
