"""deconstructor - break words into morphemes and show how they combine."""

__version__ = "0.1.0"
