"""Serve a single collection configured from the environment: python -m generic_table.api"""

import logging
import os

import uvicorn

from .app import create_app_from_env

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def main():
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(create_app_from_env(), host=host, port=port)


if __name__ == "__main__":
    main()
