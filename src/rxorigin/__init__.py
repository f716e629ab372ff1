"""Manufacturing attribution mining for openFDA drug labels."""

__version__ = "0.1.0"
