import logging
import sys

from storefront.config import settings


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger writing to stdout with a bracketed prefix, e.g.
    "[ORDER] INFO order placed ...". The handler is installed only once per
    logger so repeated imports don't duplicate output.
    """
    log = logging.getLogger(name)
    log.setLevel(settings.LOG_LEVEL.upper())
    if not log.handlers:
        prefix = name.rsplit(".", 1)[-1].upper()
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(f"[{prefix}] %(levelname)s %(message)s"))
        log.addHandler(h)
        log.propagate = False
    return log
