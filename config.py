"""
CareSync: Runtime Configuration
Environment-driven settings shared by the backend, sync layer and consoles
"""

import os

# ============================================================================
# STORAGE
# ============================================================================

DATA_PATH = os.getenv("CARESYNC_DATA_PATH", "caresync_data.json")
STORAGE_QUOTA_BYTES = 5 * 1024 * 1024

# ============================================================================
# SYNC
# ============================================================================

SYNC_API_URL = os.getenv("SYNC_API_URL", "")  # empty -> simulated backend
SYNC_LATENCY_SECONDS = float(os.getenv("SYNC_LATENCY_SECONDS", "0.5"))
SYNC_FLUSH_TIMEOUT = float(os.getenv("SYNC_FLUSH_TIMEOUT", "30"))
START_ONLINE = os.getenv("CARESYNC_START_ONLINE", "1") not in ("0", "false", "no")

# ============================================================================
# PAGE ASSET CACHE
# ============================================================================

ASSET_CACHE_VERSION = int(os.getenv("ASSET_CACHE_VERSION", "2"))
ASSET_ORIGIN = os.getenv("ASSET_ORIGIN", "http://localhost:5173")
STATIC_ASSETS = [
    "/",
    "/index.html",
    "/src/main.tsx",
    "/src/index.css",
    "/manifest.json",
]
OFFLINE_FALLBACK_DOCUMENT = "/index.html"

# ============================================================================
# CONSOLES
# ============================================================================

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))
DOCTOR_ID = "dr-001"
