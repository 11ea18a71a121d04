import json
import os
from typing import List

from dotenv import load_dotenv

from ddoc_sync.constants import DEFAULT_COUCHDB_URL, DEFAULT_REQUEST_TIMEOUT, DESIGN_DOCS_DIR

CONFIG_FILE = "sync_config.json"

# ============================================================
# Global Configuration Variables
# ============================================================
COUCHDB_URL: str = DEFAULT_COUCHDB_URL
COUCHDB_DATABASE: str = ""

# Seconds before a CouchDB request is abandoned
COUCHDB_TIMEOUT: float = DEFAULT_REQUEST_TIMEOUT

# Locations searched for the design docs root (directories or zip archives)
SEARCH_PATH: List[str] = []

# Name of the directory holding the design documents on every search root
ROOT_NAME: str = DESIGN_DOCS_DIR


def _split_search_path(value) -> List[str]:
    """Accept either an os.pathsep separated string or a JSON list."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v]
    return [p for p in str(value).split(os.pathsep) if p]


def _read_json_config(config_file: str) -> dict:
    if not os.path.exists(config_file):
        return {}
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in config file {config_file}: {e}")
        return {}
    except IOError as e:
        print(f"Failed to read config file {config_file}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


# ============================================================
# Configuration Loading
# ============================================================
def load_config(config_file: str = CONFIG_FILE) -> None:
    """Load configuration from the environment, .env and sync_config.json.

    Environment variables win over the JSON file; the JSON file wins over
    the built-in defaults.
    """
    global COUCHDB_URL, COUCHDB_DATABASE, COUCHDB_TIMEOUT, SEARCH_PATH, ROOT_NAME

    load_dotenv()
    data = _read_json_config(config_file)

    COUCHDB_URL = os.getenv("COUCHDB_URL") or data.get("couchdb_url") or DEFAULT_COUCHDB_URL
    COUCHDB_DATABASE = os.getenv("COUCHDB_DATABASE") or data.get("couchdb_database") or ""
    ROOT_NAME = os.getenv("DDOC_ROOT_NAME") or data.get("root_name") or DESIGN_DOCS_DIR

    timeout = os.getenv("COUCHDB_TIMEOUT") or data.get("couchdb_timeout")
    try:
        COUCHDB_TIMEOUT = float(timeout) if timeout else DEFAULT_REQUEST_TIMEOUT
    except ValueError:
        print(f"Ignoring invalid COUCHDB_TIMEOUT: {timeout!r}")
        COUCHDB_TIMEOUT = DEFAULT_REQUEST_TIMEOUT

    SEARCH_PATH = _split_search_path(os.getenv("DDOC_SEARCH_PATH") or data.get("search_path")) or [os.getcwd()]


# Load configuration on module import
load_config()
