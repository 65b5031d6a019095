"""Force curve feature extraction for mechanical keyboard switches."""

__version__ = "1.0.0"
