"""Entry point for python -m segcrop."""

from .cli import configure_logging, parse_args
from .runners.headless import run_headless


def main():
    """Main entry point."""
    config = parse_args()
    configure_logging(config.verbose)
    run_headless(config)


if __name__ == "__main__":
    main()
