import os

from dotenv import load_dotenv

load_dotenv()

MODE = os.getenv("SPGATEWAY_MODE", "production")
MERCHANT_ID = os.getenv("SPGATEWAY_MERCHANT_ID")
HASH_KEY = os.getenv("SPGATEWAY_HASH_KEY")
HASH_IV = os.getenv("SPGATEWAY_HASH_IV")
HTTP_TIMEOUT = float(os.getenv("SPGATEWAY_HTTP_TIMEOUT", "20"))
NOTIFY_HOST = os.getenv("SPGATEWAY_NOTIFY_HOST", "0.0.0.0")
NOTIFY_PORT = int(os.getenv("SPGATEWAY_NOTIFY_PORT", "8000"))
LOG_LEVEL = os.getenv("SPGATEWAY_LOG_LEVEL", "INFO").upper()


def load_options() -> dict:
    """Credential options read from the environment (and ``.env``)."""
    return {
        "mode": MODE,
        "merchant_id": MERCHANT_ID,
        "hash_key": HASH_KEY,
        "hash_iv": HASH_IV,
    }
