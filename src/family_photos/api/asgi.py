"""ASGI entrypoint serving the family photos API."""

from family_photos.api.app import create_app
from family_photos.containers import build_container

app = create_app(build_container())


def main() -> None:
    """Serve the API with uvicorn (requires the ``server`` extra)."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)  # noqa: S104
