"""Entry point for ``python -m sse_streamer``."""

from .cli import main

if __name__ == "__main__":
    main()
