"""CLI interface for the Privastead server setup tool."""
import typer
from . import config
from . import steps
from . import utils


def setup():
    """Set up a Privastead server in the current directory."""
    try:
        settings = config.Settings.from_env()
    except ValueError as e:
        raise typer.BadParameter(str(e))

    utils.setup_logging(settings.verbose)

    result = steps.provision_server(settings)
    if not result.ok:
        raise typer.Exit(result.exit_code)


app = typer.Typer(
    name="privastead-setup",
    help="Interactive setup of a Privastead server.",
    add_completion=False,
    invoke_without_command=True,
    callback=setup,
)


if __name__ == "__main__":
    app()
