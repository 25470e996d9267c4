import os
from dotenv import load_dotenv

load_dotenv()


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


# LLM providers (priority: Gemini → OpenRouter → Ollama)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "tngtech/deepseek-r1t2-chimera:free")
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.1:8b")
LLM_REQUEST_TIMEOUT_SECONDS = _env_float("LLM_REQUEST_TIMEOUT_SECONDS", 60.0)

# Reddit
REDDIT_BASE_URL = os.getenv("REDDIT_BASE_URL", "https://www.reddit.com")
REDDIT_USER_AGENT = os.getenv("REDDIT_USER_AGENT", "shorts-workflow/0.2 (short-form script builder)")
REDDIT_TIMEOUT_SECONDS = _env_float("REDDIT_TIMEOUT_SECONDS", 10.0)

# Generation fan-out
GENERATION_MAX_WORKERS = max(1, _env_int("GENERATION_MAX_WORKERS", 8))
GENERATION_TIMEOUT_SECONDS = _env_float("GENERATION_TIMEOUT_SECONDS", 90.0)

# Production settings bounds
TIMEFRAMES = ("day", "week", "month", "year", "all")
VOICE_PROFILES = ("narrator", "friendly", "dramatic")
STORY_COUNT_MIN = 1
STORY_COUNT_MAX = 5
DURATION_MIN = 30  # seconds
DURATION_MAX = 60

# Defaults used by the CLI (same as the web form)
DEFAULT_SUBREDDIT = os.getenv("DEFAULT_SUBREDDIT", "AskReddit")
DEFAULT_TIMEFRAME = "week"
DEFAULT_STORY_COUNT = 2
DEFAULT_DURATION = 45
DEFAULT_VOICE_PROFILE = "narrator"
DEFAULT_INCLUDE_BROLL = True

# Vertical format for YouTube Shorts (9:16)
VIDEO_WIDTH = 1080
VIDEO_HEIGHT = 1920
