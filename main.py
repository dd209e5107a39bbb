"""Main entrypoint for the m-manager API.

This module builds the application from environment settings and includes the main
entrypoint for running the app with Uvicorn.
"""

import sys
from pathlib import Path

# Ensure the project root is in sys.path for 'uv run main.py' or 'python main.py'
PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mmanager.core.settings import get_settings  # noqa: E402
from mmanager.main import create_app  # noqa: E402

app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
