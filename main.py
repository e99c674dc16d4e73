"""Main entry point for study-partner CLI."""

from study_partner.cli.app import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
