"""Logging setup shared by the Streamlit page and the maintenance script."""

import logging
import sys
from collections import deque
from typing import Callable, MutableMapping

import streamlit as st

_HANDLER_NAME = "attestation.console"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stdout handler to the ``attestation`` logger.

    Streamlit re-executes the page script on every interaction, so this is
    called many times per session; the handler is only added once.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger("attestation")
    logger.setLevel(log_level)

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)


def dev_notice(msg: str, debug: bool = False) -> None:
    """Developer-only notice: shown in the page in debug mode, logged otherwise."""
    if debug:
        st.warning(msg)
    else:
        logging.getLogger("attestation.dev").warning(msg)


def transition_trace(store: MutableMapping, key: str = "_trace", maxlen: int = 50) -> Callable:
    """Session listener keeping the last ``maxlen`` screens under ``store[key]``."""

    def record(snapshot) -> None:
        store.setdefault(key, deque(maxlen=maxlen)).append(snapshot.quiz.current_screen.value)

    return record
