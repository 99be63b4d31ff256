"""
This module contains the configuration settings for the AgentOS desktop shell.
It defines paths, backend launch commands, readiness probe parameters and
logging options. Values can be overridden through environment variables or a
.env file in the project root.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 't', 'yes', 'y')


#* --- Core Paths ---
BASE_DIR = pathlib.Path(__file__).resolve().parent.parent  # Shell Root
LOGS_DIR = BASE_DIR / "logs"
OVERRIDES_JSON_PATH = BASE_DIR / "overrides.json"

#* --- App Settings ---
APP_NAME = "AgentOS"
PROCESS_TITLE = "AgentOS - Desktop"
WINDOW_WIDTH = int(os.getenv("AGENTOS_WINDOW_WIDTH", "1280"))
WINDOW_HEIGHT = int(os.getenv("AGENTOS_WINDOW_HEIGHT", "800"))

#* --- Backend Launch Settings ---
# When the shell is started from inside this directory, its parent is the project root.
SHELL_DIR_NAME = os.getenv("AGENTOS_SHELL_DIR", "desktop")
# Pre-built server bundle, relative to the project root. Its presence selects production mode.
SERVER_ARTIFACT = os.getenv("AGENTOS_SERVER_ARTIFACT", "dist/server.js")
PRODUCTION_COMMAND = ("node", SERVER_ARTIFACT)
DEVELOPMENT_COMMAND = ("npx", "tsx", "server.ts")
# 'inherit' shares this console with the backend, 'log' routes its output through logging.
SERVER_OUTPUT = os.getenv("AGENTOS_SERVER_OUTPUT", "inherit").lower()
KILL_PROCESS_TREE = _env_flag("AGENTOS_KILL_PROCESS_TREE", "False")

#* --- Readiness Probe Settings ---
SERVER_HOST = os.getenv("AGENTOS_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("AGENTOS_PORT", "3011"))
READINESS_MAX_ATTEMPTS = int(os.getenv("AGENTOS_MAX_ATTEMPTS", "60"))
READINESS_RETRY_DELAY = float(os.getenv("AGENTOS_RETRY_DELAY", "0.5"))  # seconds
READINESS_CONNECT_TIMEOUT = 1.0  # seconds

#* --- Logging ---
LOG_TO_FILE = _env_flag("AGENTOS_LOG_TO_FILE", "True")
LOG_FILE_PATH = LOGS_DIR / "desktop.log"

#* --- MODIFIABLE SETTINGS (Changeable through overrides.json) ---
MODIFIABLE_SETTINGS = {
    # Backend
    "SERVER_OUTPUT", "KILL_PROCESS_TREE",
    # Readiness probe
    "SERVER_HOST", "SERVER_PORT",
    "READINESS_MAX_ATTEMPTS", "READINESS_RETRY_DELAY", "READINESS_CONNECT_TIMEOUT",
    # Window
    "WINDOW_WIDTH", "WINDOW_HEIGHT",
    # Logging
    "LOG_TO_FILE",
}
