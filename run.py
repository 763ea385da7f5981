# -*- coding: utf-8 -*-

"""
Entry point for running the ArchyTask CLI from a source checkout.
"""

from archytask.cli import app


def main():
    """
    Hand over to the Typer application (it configures logging itself).
    """
    app(prog_name="archytask")


if __name__ == '__main__':
    main()
