"""Runtime settings read from the environment and an optional .env file."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    definitions_path: str = ""
    encoding: str = "utf-8"
    log_level: str = "WARNING"


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        definitions_path=os.getenv("TRIGGER_GRAPH_DEFINITIONS", ""),
        encoding=os.getenv("TRIGGER_GRAPH_ENCODING", "utf-8") or "utf-8",
        log_level=(os.getenv("TRIGGER_GRAPH_LOG_LEVEL", "WARNING") or "WARNING").upper(),
    )
