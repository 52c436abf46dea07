"""Run the API with uvicorn.

Usage:
    python -m tutorhub.serve
"""
import logging

import uvicorn

from tutorhub.core import config


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config.validate_runtime_config()
    uvicorn.run(
        "tutorhub.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.RELOAD,
    )


if __name__ == "__main__":
    main()
