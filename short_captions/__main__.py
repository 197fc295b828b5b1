"""Package entry point for ``python -m short_captions``.

Delegates to the CLI's main() function.
"""

from short_captions.cli import main

if __name__ == "__main__":
    main()
