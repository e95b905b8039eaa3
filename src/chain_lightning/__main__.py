"""Entry point for running Chain Lightning as a module.

Usage:
    python -m chain_lightning [command] [options]

Example:
    python -m chain_lightning inspect -m dist/chain-lightning.json
    python -m chain_lightning render search --inline-deps
"""

from chain_lightning.cli import app

if __name__ == "__main__":
    app()
