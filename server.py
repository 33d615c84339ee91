from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

import uvicorn


def run_api(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the API server."""
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=reload,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    p = argparse.ArgumentParser(description="Dynasty pick tracker API server")
    p.add_argument("--host", default=os.environ.get("PICKS_HOST", "127.0.0.1"))
    p.add_argument("--port", type=int, default=int(os.environ.get("PICKS_PORT", "8000")))
    p.add_argument("--reload", action="store_true")
    args = p.parse_args(argv)
    run_api(host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
