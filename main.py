"""Main entry point for the ai-quiz CLI."""

from ai_quiz.cli.app import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
