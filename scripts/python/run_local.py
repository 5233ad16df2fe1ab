"""Run the catalog locally with auto-reload."""

import os

import uvicorn


def main() -> None:
    """Run the server in development configuration."""
    os.environ.setdefault("APP_ENV", "development")
    uvicorn.run("recipe_catalog.main:app", host="127.0.0.1", port=8000, reload=True)


if __name__ == "__main__":
    main()
