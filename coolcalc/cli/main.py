"""
CoolCalc CLI - Main Entry Point

Unified Typer CLI that assembles all module sub-commands.

Usage:
    coolcalc version
    coolcalc migrate
    coolcalc eng [command]
"""

import typer

import coolcalc

app = typer.Typer(
    name="coolcalc",
    help="Refrigeration cooling-load calculator for freezers, cold rooms and blast freezers.",
    no_args_is_help=True,
)


@app.command()
def version():
    """Show CoolCalc version."""
    typer.echo(f"coolcalc {coolcalc.__version__}")


@app.command()
def migrate():
    """Run database schema migrations for all modules."""
    from coolcalc.core.db import migrate_all

    migrate_all()
    typer.echo("Database migration complete.")


def _register_modules():
    """Register module CLI sub-apps. Silently skips modules missing a cli.py."""
    module_registry = [
        ("coolcalc.engineering.cli", "eng", "Cooling load calculations"),
    ]

    for module_path, name, help_text in module_registry:
        try:
            import importlib

            mod = importlib.import_module(module_path)
            app.add_typer(mod.app, name=name, help=help_text)
        except (ImportError, AttributeError):
            pass


_register_modules()


def main():
    """Entry point for the coolcalc CLI."""
    app()


if __name__ == "__main__":
    main()
