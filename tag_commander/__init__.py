"""tag-commander: search a tagged file corpus with a small boolean query language."""

__version__ = "0.1.0"
