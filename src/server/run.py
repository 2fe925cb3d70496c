"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn


def main() -> None:
    """Run the development server."""
    uvicorn.run(
        "src.server.app:create_app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["src"],
        factory=True,
    )


if __name__ == "__main__":
    main()
