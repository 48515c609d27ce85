# config.py

import os
from dotenv import load_dotenv

# Load .env from the dashboard package first, then the working directory
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))
load_dotenv()

# ==============================
# Backend
# ==============================

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000").rstrip("/")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

# ==============================
# Job view
# ==============================

POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "2"))
RECENT_JOBS_PAGE_SIZE = int(os.getenv("RECENT_JOBS_PAGE_SIZE", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
