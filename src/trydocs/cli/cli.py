"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from trydocs.cli.commands import publish_cmd, serve_cmd


app = typer.Typer(name="trydocs", no_args_is_help=True, help="Interactive documentation publishing")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


app.command(name="publish")(publish_cmd)
app.command(name="serve")(serve_cmd)
