#  Weather Proxy - Entry Point
#
#  Launches the FastAPI server via uvicorn.
#
#  Depends on: weather_proxy/app.py, weather_proxy/config.py, weather_proxy/logging_config.py
#  Used by:    (run directly)

import sys

import uvicorn

from weather_proxy.logging_config import setup_logging


def main():
    try:
        from weather_proxy.config import HOST, LOG_FORMAT, LOG_LEVEL, PORT
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(level=LOG_LEVEL, fmt=LOG_FORMAT)

    uvicorn.run(
        "weather_proxy.app:app",
        host=HOST,
        port=PORT,
    )


if __name__ == "__main__":
    main()
