"""langtutor - immersive language tutoring on top of the Claude CLI."""

__version__ = "0.1.0"
