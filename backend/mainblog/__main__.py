"""
Run the API with uvicorn: `python -m mainblog`.

Host and port come from settings (0.0.0.0:4000 unless overridden by
BACKEND_HOST / BACKEND_PORT).
"""

import uvicorn

from mainblog.config import settings


def main() -> None:
    uvicorn.run(
        "mainblog.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
