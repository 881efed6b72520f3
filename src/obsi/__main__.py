"""Allow running obsi with `python -m obsi`."""

from obsi.interfaces.cli.app import run_cli

if __name__ == "__main__":
    run_cli()
