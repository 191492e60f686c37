"""XML parsing, tree editing and serialisation, with a Gemini capsule builder."""

__version__ = "0.1.0"
__all__ = ["__version__"]