"""Launch the server with uvicorn: ``python -m scribe``."""

import uvicorn

from scribe.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "scribe.main:app",
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers,
    )


if __name__ == "__main__":
    main()
