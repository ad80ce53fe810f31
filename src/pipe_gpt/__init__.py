"""pipe-gpt: pipe text from the command line straight into a chat model."""

__version__ = "0.3.0"
