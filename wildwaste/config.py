"""Centralized config loading, read once at import time."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env from project root (parent of wildwaste/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

_config = yaml.safe_load(CONFIG_PATH.read_text())

if os.environ.get("WILDWASTE_BASE_URL"):
    _config["base_url"] = os.environ["WILDWASTE_BASE_URL"]


def get_config() -> dict:
    """Return the loaded config dictionary."""
    return _config
