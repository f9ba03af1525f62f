"""Entry point for running the monitor as module: python -m swapwatch"""

# Load .env file before importing anything else
from dotenv import load_dotenv
load_dotenv()

from swapwatch.monitor import cli

if __name__ == "__main__":
    cli()
