#!/usr/bin/env python3
"""Startup script for the Loan Intake & Review API.

This script initializes the workflow with the LLM decision agent and runs
the FastAPI server.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Example:
    Run with the default model::

        python -m lending_api.run_api

    Or pick a model and keep applications on disk::

        python -m lending_api.run_api --model gemini/gemini-1.5-flash --persist
"""

import argparse
from pathlib import Path

import uvicorn

from agents.decision_agent import DecisionAgent
from utils.config import config
from workflows import ApplicationStore

from .api import app
from .api_utils import initialize_service


def main():
    """Main entry point for running the API server."""
    parser = argparse.ArgumentParser(
        description="Loan Intake & Review API Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run on default port 8000 with PRIMARY_MODEL from .env
  python -m lending_api.run_api

  # Run with a specific model and a fallback
  python -m lending_api.run_api --model gemini/gemini-1.5-pro --fallback-model gpt-4o

  # Keep a JSON snapshot of every application under outputs/applications
  python -m lending_api.run_api --persist --output-dir outputs
        """
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=f"LLM model (default: {config.PRIMARY_MODEL})"
    )
    parser.add_argument(
        "--fallback-model",
        type=str,
        default=None,
        help="Fallback LLM model (default: FALLBACK_MODEL from .env)"
    )
    parser.add_argument(
        "--persist",
        action="store_true",
        help="Persist applications as JSON snapshots and reload them on start"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=str(config.OUTPUTS_DIR),
        help=f"Base output directory (default: {config.OUTPUTS_DIR})"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )

    args = parser.parse_args()

    config.print_config()
    print()
    print(f"Server will run on: http://{args.host}:{args.port}")
    print(f"API documentation: http://{args.host}:{args.port}/docs")
    print()

    try:
        agent = DecisionAgent(model=args.model, fallback_model=args.fallback_model)
        store = None
        if args.persist:
            store = ApplicationStore.load(Path(args.output_dir) / "applications")
        initialize_service(provider=agent, store=store)
        print(f"✓ Workflow initialized with model {agent.model}")
        print()
    except Exception as e:
        print(f"✗ Failed to initialize workflow: {e}")
        return 1

    uvicorn.run(app, host=args.host, port=args.port)

    return 0


if __name__ == "__main__":
    exit(main())
