"""Run the relay with uvicorn: ``python -m voice_relay``."""

from __future__ import annotations

import uvicorn
from dotenv import load_dotenv

from voice_relay.runtime.settings_loader import load_settings


def main() -> None:
    load_dotenv()
    settings = load_settings()
    uvicorn.run(
        "voice_relay.server:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
