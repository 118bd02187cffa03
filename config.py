"""Configuration module for the podcast asset pipeline."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Generation backend: "anthropic" or "gemini"
GENERATION_BACKEND = os.getenv("GENERATION_BACKEND", "gemini").lower()

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
MAX_OUTPUT_TOKENS = int(os.getenv("MAX_OUTPUT_TOKENS", "4096"))

# Retry policy for the step runner (the pipeline itself never retries)
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
RETRY_BACKOFF_MULTIPLIER = 2

# Number of generation steps allowed in flight at once
MAX_CONCURRENT_STEPS = int(os.getenv("MAX_CONCURRENT_STEPS", "6"))

# How much raw model text goes into failure logs
RAW_LOG_CHARS = 500

# YouTube chapter lists are capped
MAX_YOUTUBE_CHAPTERS = 100

# Output Paths
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "./output"))
CHECKPOINT_DIR = OUTPUT_DIR / "checkpoints"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
