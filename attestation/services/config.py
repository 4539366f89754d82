import os
from dataclasses import dataclass
from pathlib import Path

import streamlit as st

_ROOT = Path(__file__).resolve().parents[2]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _get(key: str, default: str | None = None) -> str | None:
    # Streamlit secrets > environment > default
    try:
        if hasattr(st, "secrets") and key in st.secrets:
            return str(st.secrets[key])
    except Exception:
        # no secrets.toml (tests, scripts, local runs)
        pass
    return os.getenv(key, default)


def _get_int(key: str, default: int) -> int:
    raw = _get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _get_bool(key: str, default: bool) -> bool:
    raw = _get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{key} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    topics_path: Path
    questions_path: Path
    pass_threshold: int = 80
    gate_results_exit: bool = True   # ask before leaving results via the header
    debug: bool = False
    log_level: str = "INFO"


def get_settings() -> Settings:
    threshold = _get_int("ATTESTATION_PASS_THRESHOLD", 80)
    if not 0 <= threshold <= 100:
        raise ValueError(f"ATTESTATION_PASS_THRESHOLD must be within 0..100, got {threshold}")
    return Settings(
        topics_path=Path(_get("ATTESTATION_TOPICS_PATH", str(_ROOT / "data" / "topics.jsonl"))),
        questions_path=Path(_get("ATTESTATION_QUESTIONS_PATH", str(_ROOT / "data" / "questions.jsonl"))),
        pass_threshold=threshold,
        gate_results_exit=_get_bool("ATTESTATION_GATE_RESULTS_EXIT", True),
        debug=_get_bool("ATTESTATION_DEBUG", False),
        log_level=(_get("ATTESTATION_LOG_LEVEL", "INFO") or "INFO").upper(),
    )
