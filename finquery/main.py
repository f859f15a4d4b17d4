"""Entry point for running the API server."""

import uvicorn

from finquery.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "finquery.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
