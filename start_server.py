#!/usr/bin/env python3
"""
Start the Job Portal API with uvicorn.
"""
import argparse
import logging

import uvicorn
from dotenv import load_dotenv

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Run the Job Portal API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    args = parser.parse_args()

    load_dotenv()
    logger.info("Starting backend on http://%s:%d", args.host, args.port)
    uvicorn.run(
        "job_portal_app.backend.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
