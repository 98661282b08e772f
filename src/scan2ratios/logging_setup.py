import logging


# pdfplumber logs every content stream operator through pdfminer at DEBUG.
NOISY_LOGGERS = ("pdfminer", "PIL")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s - %(name)s - %(message)s",
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
