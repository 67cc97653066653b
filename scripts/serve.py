"""CLI script to start the FastAPI server.

Usage:
    python scripts/serve.py --db-path data/database.json --port 8000
"""

from __future__ import annotations

import os
from pathlib import Path

import typer
import uvicorn

app = typer.Typer(help="Start the draft lottery API server")


@app.command()
def serve(
    db_path: Path = typer.Option(Path("data/database.json"), help="Path to database.json"),
    host: str = typer.Option("0.0.0.0", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
    workers: int = typer.Option(1, help="Number of worker processes"),
) -> None:
    """Start the FastAPI server against a lottery database.

    The database is created with the default league if it does not exist.
    Workers share the file, so keep ``--workers 1`` unless the store sits
    behind a single writer.
    """
    typer.echo("=" * 60)
    typer.echo("Draft Lottery API Server")
    typer.echo("=" * 60)
    typer.echo(f"Database: {db_path}")
    typer.echo(f"Listening on: http://{host}:{port}")
    typer.echo("=" * 60)

    # Worker processes re-read configuration from the environment
    os.environ["LOTTERY_DB_PATH"] = str(db_path)

    from draft_lottery.data.store import LotteryStore, StoreError

    try:
        LotteryStore(db_path).initialize()
    except StoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo("\n✓ Database ready")

    typer.echo(f"\nStarting server with {workers} worker(s)...\n")

    uvicorn.run(
        "draft_lottery.api.server:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1,  # Can't use workers with reload
        log_level="info",
    )


if __name__ == "__main__":
    app()
