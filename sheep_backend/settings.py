import os

from dotenv import load_dotenv

load_dotenv()

# ==============================
# File / Job Settings
# ==============================

OUTPUT_DIR = os.getenv("OUTPUT_DIR", "./outputs")
PROCESSING_DELAY_SECONDS = float(os.getenv("PROCESSING_DELAY_SECONDS", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
