import argparse
from typing import Optional, Sequence

import uvicorn

from ai_code.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the AI code proxy")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for the server; defaults to LOG_LEVEL from the environment",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    log_level = (args.log_level or get_settings().log_level).lower()

    uvicorn.run(
        "ai_code.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
