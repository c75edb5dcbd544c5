from __future__ import annotations
import logging
import os
import uvicorn
from code_assist_gateway.infrastructure.config import get_settings

def main() -> None:
    """Start the uvicorn ASGI server."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    uvicorn.run(
        "code_assist_gateway.interface.app:create_app",
        factory=True,
        host=os.environ.get("HOST", settings.host),
        port=int(os.environ.get("PORT", settings.port)),
        log_level=settings.log_level.lower(),
        timeout_keep_alive=75,
    )


if __name__ == "__main__":
    main()
