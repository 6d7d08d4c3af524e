"""Run the API with uvicorn: ``python -m creator_api``."""

import uvicorn

from creator_api.config import settings


def main() -> None:
    uvicorn.run("creator_api.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
