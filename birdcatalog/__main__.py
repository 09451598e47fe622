"""Run the API with uvicorn: `python -m birdcatalog` or the `birdcatalog` script."""

import uvicorn

from birdcatalog.config import settings


def main() -> None:
    uvicorn.run(
        "birdcatalog.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
