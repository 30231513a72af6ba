"""
Entry point for the dashboard plugins API hub.

Run with:
    uvicorn main:app --reload --port 3000
    python main.py
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import uvicorn
from config import get_settings
from plugin_hub.api.main import app
from plugin_hub.core.log import configure_logging

settings = get_settings()


def main() -> None:
    """Run the API server."""
    configure_logging(settings.log_level)
    uvicorn.run(
        "plugin_hub.api.main:app",
        host=settings.api_host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
