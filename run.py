"""Entry point for running the shift roster web application."""

from shiftroster import create_app

app = create_app()

if __name__ == "__main__":
    app.run()
