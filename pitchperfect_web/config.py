from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import streamlit as st
from streamlit.errors import StreamlitSecretNotFoundError

from pitchperfect_core.narrative import DEFAULT_MODEL

DB_PATH_KEY = "PITCHPERFECT_DB_PATH"
API_KEY_KEY = "OPENAI_API_KEY"
MODEL_KEY = "PITCHPERFECT_MODEL"
LOG_LEVEL_KEY = "PITCHPERFECT_LOG_LEVEL"


def get_setting(name: str, default: str | None = None) -> str | None:
    """Look a setting up in ``st.secrets`` first, then the environment."""
    secret_val: str | None = None
    try:
        secret_val = st.secrets.get(name)
    except StreamlitSecretNotFoundError:
        secret_val = None
    if secret_val:
        return str(secret_val)
    env_val = os.getenv(name)
    if env_val:
        return env_val
    return default


@dataclass(frozen=True)
class PortalSettings:
    db_path: str | None
    api_key: str | None
    model: str
    log_level: str

    @property
    def missing(self) -> list[str]:
        return [DB_PATH_KEY] if not self.db_path else []


def load_settings() -> PortalSettings:
    return PortalSettings(
        db_path=get_setting(DB_PATH_KEY),
        api_key=get_setting(API_KEY_KEY),
        model=get_setting(MODEL_KEY, DEFAULT_MODEL) or DEFAULT_MODEL,
        log_level=(get_setting(LOG_LEVEL_KEY, "INFO") or "INFO").upper(),
    )


def configure_logging(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
