"""Allow ``python -m swaggins``."""

from swaggins.app import main

main()
