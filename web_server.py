#!/usr/bin/env python3
"""
CLI tool to start the calendar FastAPI web server.

This script provides a convenient command-line interface to start the
FastAPI backend server using uvicorn. It loads backend/.env and reports
which database the server will use before starting.

Usage:
    python3 web_server.py                    # Start with defaults
    python3 web_server.py --host 0.0.0.0     # Listen on all interfaces
    python3 web_server.py --port 8080        # Use custom port
    python3 web_server.py --reload           # Enable auto-reload for development

Environment Variables:
    CALENDAR_DB_URL: SQLAlchemy database URL (PostgreSQL or SQLite)
    CALENDAR_CORS_ORIGINS: Comma-separated allowed origins (default: "*")
    CALENDAR_ENV: Environment (production/development, default: development)
    CALENDAR_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)

Example:
    # Start a local server backed by a SQLite file
    export CALENDAR_DB_URL="sqlite:///./calendar.db"
    python3 web_server.py --reload
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def load_env_file() -> None:
    """
    Load environment variables from backend/.env file.

    Variables already set in the environment take precedence over .env values.
    """
    env_path = Path(__file__).parent / "backend" / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


def describe_database() -> str:
    """
    Describe the configured database without exposing credentials.

    Returns:
        Database dialect and host/path, or a note that the default is used
    """
    url = os.environ.get("CALENDAR_DB_URL")
    if not url:
        return "default (postgresql on localhost, set CALENDAR_DB_URL to override)"

    scheme, _, rest = url.partition("://")
    location = rest.rsplit("@", 1)[-1]
    return f"{scheme} ({location})"


def parse_arguments() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace with host, port, and reload flags
    """
    parser = argparse.ArgumentParser(
        description="Start the calendar FastAPI web server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start development server with auto-reload
  python3 web_server.py --reload

  # Start server on all interfaces (accessible from network)
  python3 web_server.py --host 0.0.0.0

  # Start server on custom port
  python3 web_server.py --port 8080

Environment Variables:
  CALENDAR_DB_URL        SQLAlchemy database URL
  CALENDAR_CORS_ORIGINS  Allowed CORS origins (comma-separated)
  CALENDAR_ENV           Environment (production/development)
  CALENDAR_LOG_LEVEL     Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        """
    )

    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1). "
             "Use 0.0.0.0 to listen on all interfaces."
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind the server to (default: 8000)"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development. The server will automatically "
             "restart when code changes are detected. Not recommended for production."
    )

    return parser.parse_args()


def main() -> None:
    """
    Main entry point for the web server CLI tool.

    Parses command-line arguments, loads backend/.env, and starts the
    FastAPI server using uvicorn.
    """
    args = parse_arguments()

    # Ensure the repo root is on sys.path so "backend.src.main" is importable
    repo_root = str(Path(__file__).parent)
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)

    load_env_file()

    import uvicorn

    print(f"\nStarting calendar web server...")
    print(f"Host: {args.host}")
    print(f"Port: {args.port}")
    print(f"Database: {describe_database()}")
    print(f"Auto-reload: {'enabled' if args.reload else 'disabled'}")
    print(f"\nAPI documentation: http://{args.host}:{args.port}/docs")
    print(f"Health check: http://{args.host}:{args.port}/health")
    print("\nPress CTRL+C to stop the server\n")

    try:
        uvicorn.run(
            "backend.src.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\n\nServer stopped by user (CTRL+C)")
        sys.exit(0)


if __name__ == "__main__":
    main()
