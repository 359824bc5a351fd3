#!/usr/bin/env python3
"""
South African Labour Law Assistant - Main Entry Point

Usage:
    python main.py          # Run the HTTP API (default)
    python main.py --cli    # Run CLI mode (interactive intake chat)
"""

import asyncio
import contextlib
import sys
from pathlib import Path

# Ensure project root is in path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.config.logging_config import logger
from src.config.settings import config, validate_config_dependencies, validate_env_for_app


def _validate_startup() -> None:
    validate_env_for_app()
    errors = validate_config_dependencies()
    if errors:
        raise SystemExit("Invalid configuration:\n- " + "\n- ".join(errors))


def run_server():
    """Launch the FastAPI app under uvicorn"""
    import uvicorn

    uvicorn.run("src.api.app:app", host=config.API_HOST, port=config.API_PORT)


async def run_cli_async():
    """Run interactive CLI mode (Async)"""
    from src.api.app import get_assistant

    assistant = get_assistant()
    history: list[dict] = []
    case_id = None

    logger.info("South African Labour Law Assistant - CLI Mode. Type 'exit' to quit.")

    while True:
        print("You: ", end="", flush=True)
        question = (await asyncio.to_thread(sys.stdin.readline)).strip()

        if question.lower() in ("exit", "quit", "q"):
            logger.info("Goodbye!")
            break
        if not question:
            continue

        result = await assistant.chat(question, history=history, case_id=case_id)
        case_id = result.case_id
        history.extend([{"role": "user", "content": question}, {"role": "assistant", "content": result.reply}])
        print(f"\nAssistant [{result.stage}]: {result.reply}\n", flush=True)


def run_cli():
    """Wrapper for async CLI"""
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_cli_async())


def main():
    """Main entry point"""
    _validate_startup()
    if len(sys.argv) > 1 and sys.argv[1] == "--cli":
        run_cli()
    else:
        run_server()


if __name__ == "__main__":
    main()
