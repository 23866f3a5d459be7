"""Entry: start the backup/restore web server."""
import logging
import uvicorn

from spotify_backup.config import API_HOST, API_PORT


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    logging.getLogger(__name__).info("Starting server on %s:%d", API_HOST, API_PORT)
    uvicorn.run(
        "spotify_backup.api.app:app",
        host=API_HOST,
        port=API_PORT,
    )


if __name__ == "__main__":
    main()
