"""serve command: run the narration HTTP service."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on.")
@click.pass_context
def serve_cmd(ctx, host: str, port: int):
    """Serve POST /api/summarize and POST /api/compare."""
    import uvicorn

    from gitscope_core.api import create_app
    from gitscope_core.config import provider_api_key
    from gitscope_core.errors import GitScopeError

    config = ctx.obj["config"]
    try:
        api_key = provider_api_key(config)
    except GitScopeError as e:
        raise click.ClickException(e.message)
    if not api_key:
        console.print(
            f"[yellow]No {config.get('provider', 'openai')} API key set; "
            "narration endpoints will answer with fallback text.[/yellow]"
        )
    uvicorn.run(create_app(config), host=host, port=port)
