# flashread/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Models
GROQ_SUMMARY_MODEL = os.getenv("GROQ_SUMMARY_MODEL", "llama-3.3-70b-versatile")
GROQ_CHAT_MODEL = os.getenv("GROQ_CHAT_MODEL", "llama-3.1-8b-instant")

# Server-side default keys, used only when a request carries no key header
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
RAPIDAPI_KEY = os.getenv("RAPIDAPI_KEY", "")

RAPIDAPI_HOST = os.getenv("RAPIDAPI_HOST", "article-extractor-and-summarizer.p.rapidapi.com")
RAPIDAPI_SUMMARIZE_URL = f"https://{RAPIDAPI_HOST}/summarize"

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "60"))

# Client side
FLASHREAD_API_URL = os.getenv("FLASHREAD_API_URL", "http://localhost:8000")
FLASHREAD_STORAGE_DIR = os.getenv("FLASHREAD_STORAGE_DIR", os.path.expanduser("~/.flashread"))

FLASHREAD_DEBUG = os.getenv("FLASHREAD_DEBUG", "").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
