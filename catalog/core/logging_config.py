import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure le logging racine une seule fois (appelé au démarrage)."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("catalog").setLevel(level.upper())
