"""
main.py: start the seat allocation API under uvicorn.

Host, port and log level come from the environment (HOST, PORT, LOG_LEVEL).
The application itself is built in app.py.
"""

from __future__ import annotations

import uvicorn

from backend.utils.config import get_settings


def main() -> None:
    """Start the optimization API on the configured host and port."""
    settings = get_settings()
    print(f"\n  Flight Profit Optimizer API → http://{settings.host}:{settings.port}/docs\n")
    uvicorn.run(
        "app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
