"""
Main entry point for the FastAPI application.
Run this file to start the server that receives Slack webhooks.

Usage:
    python run_fastapi.py

Or with uvicorn directly:
    uvicorn llm_router.fastapi_app:create_default_app --factory --host 0.0.0.0 --port 3000
"""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

import uvicorn

from llm_router.config.settings import get_config

if __name__ == "__main__":
    env = os.getenv("APP_ENV", "development")
    config = get_config(env)
    debug = config.DEBUG
    port = config.PORT
    host = config.HOST

    print(f"Starting LLM router in {env} mode...")
    print(f"Server running on http://{host}:{port}")
    print(f"Slack events URL: http://{host}:{port}/slack/events")

    uvicorn.run(
        "llm_router.fastapi_app:create_default_app",
        factory=True,
        host=host,
        port=port,
        reload=debug,
        log_level="info" if debug else "warning",
    )
