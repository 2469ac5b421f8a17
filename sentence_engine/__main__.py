"""Package entry point for ``python -m sentence_engine``.

Delegates to the CLI's main(), which dispatches on the subcommand.
"""

from sentence_engine.cli import main

if __name__ == "__main__":
    main()
