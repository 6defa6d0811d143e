"""
SongLibrary Server
uvicorn 실행 진입점 (SERVICE_ADDRESS 에 바인드)
"""

import argparse

import uvicorn

from .core.config import get_settings


def main() -> None:
    settings = get_settings()
    default_host, default_port = settings.bind_address

    parser = argparse.ArgumentParser(description="SongLibrary API Server")
    parser.add_argument("--host", default=default_host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=default_port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--log-level", default="info", help="Uvicorn log level")
    args = parser.parse_args()

    uvicorn.run(
        "songlib.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
