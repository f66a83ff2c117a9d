"""Jeopardy board configuration, loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Trivia service (jService-compatible)
TRIVIA_API_URL = os.environ.get("TRIVIA_API_URL", "https://jservice.io/api")
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "10"))

# Board shape
NUM_CATEGORIES = int(os.environ.get("NUM_CATEGORIES", "6"))
CLUES_PER_CATEGORY = 5

# Category acquisition: ids are drawn from [0, CATEGORY_ID_SPACE)
CATEGORY_ID_SPACE = int(os.environ.get("CATEGORY_ID_SPACE", "20000"))
MAX_ACQUIRE_ATTEMPTS = int(os.environ.get("MAX_ACQUIRE_ATTEMPTS", "500"))
BACKOFF_BASE = float(os.environ.get("BACKOFF_BASE", "0.1"))
BACKOFF_MAX = float(os.environ.get("BACKOFF_MAX", "5"))

# Number of categories resolved in parallel when building a board
RESOLVE_WORKERS = int(os.environ.get("RESOLVE_WORKERS", "1"))

# Games not touched by DELETE are dropped after this long, or when too many pile up
GAME_TTL_SECONDS = int(os.environ.get("GAME_TTL_SECONDS", "3600"))
MAX_GAMES = int(os.environ.get("MAX_GAMES", "100"))

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
