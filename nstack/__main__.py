"""Allow `python -m nstack`."""
from nstack.cli import app

if __name__ == "__main__":
    app()
