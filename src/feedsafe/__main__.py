"""Entry point for `python -m feedsafe` and `feedsafe` CLI."""

from feedsafe.cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
