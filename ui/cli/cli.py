"""CLI entrypoint for window-anchor."""

from __future__ import annotations

import typer

from ui.cli import commands

app = typer.Typer(help="Place new windows beside the window that opened them")
config_app = typer.Typer(help="Configuration commands")


@app.command("run")
def run_cmd(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    host: str = typer.Option(None, "--host", help="Override host backend: simulated or desktop"),
) -> None:
    """Watch the desktop and place new windows."""
    commands.run(debug=debug, host=host)


@app.command("place")
def place_cmd(
    anchor_left: int = typer.Option(..., help="Anchor window left edge"),
    anchor_top: int = typer.Option(..., help="Anchor window top edge"),
    new_width: int = typer.Option(..., help="Width of the new window"),
    display: list[str] = typer.Option([], "--display", help="Work area as LEFT,TOP,WIDTH,HEIGHT"),
) -> None:
    """Compute the left edge for a new window."""
    commands.place(anchor_left=anchor_left, anchor_top=anchor_top, new_width=new_width, displays=display)


@app.command("simulate")
def simulate_cmd(
    skew_left: int = typer.Option(0, help="Pixels the simulated host adds to every left edge"),
    close_anchor: bool = typer.Option(False, "--close-anchor", help="Close the anchor before placement"),
    new_width: int = typer.Option(800, min=1, help="Width of the new window"),
) -> None:
    """Run a placement scenario on the simulated host."""
    commands.simulate(skew_left=skew_left, close_anchor=close_anchor, new_width=new_width)


@config_app.command("show")
def config_show_cmd() -> None:
    """Show effective configuration."""
    commands.config_show()


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
