# config.py
import os
from dotenv import load_dotenv

load_dotenv()

# -------------------- Backend --------------------
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "30"))

# -------------------- Session --------------------
SESSION_STORE = os.getenv("SESSION_STORE", "memory").lower()  # memory | file
SESSION_FILE = os.path.expanduser(
    os.getenv("SESSION_FILE", "~/.userhub/session.json")
)

# -------------------- UI --------------------
ADMIN_BANNER_SECONDS = float(os.getenv("ADMIN_BANNER_SECONDS", "2"))
DASHBOARD_BANNER_SECONDS = float(os.getenv("DASHBOARD_BANNER_SECONDS", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
