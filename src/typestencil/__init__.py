"""typestencil - template filters for code generation from reflected types."""

__version__ = "0.1.0"
