"""Entry point for running the chezinstall CLI.

Executing ``python -m chezinstall.interfaces.cli`` runs the install command.
"""

from .install import install

cli = install


if __name__ == "__main__":
    cli()
