"""Launch the flood-safe routing FastAPI server."""

import uvicorn

from floodroute.config import load_settings


def main():
    settings = load_settings()
    uvicorn.run("floodroute.server:app", host=settings.host, port=settings.port, reload=True)


if __name__ == "__main__":
    main()
