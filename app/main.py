"""Application entrypoint.

    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import uvicorn

from infrastructure.logging import configure_logging, get_module_logger
from server import server

app = server.handler
logger = get_module_logger()


def main():
    """Start the API server."""
    configure_logging()
    logger.info("application_startup")
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
