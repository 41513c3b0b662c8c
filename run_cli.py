import sys

import typer

import cli.cli

if __name__ == "__main__":
    # Default to a seeded demo set when no command is given
    if len(sys.argv) == 1:
        sys.argv = ["run_cli.py", "simulate", "--scenario", "just_right", "--seed", "42"]
    typer_app: typer.Typer = cli.cli.app
    typer_app()
