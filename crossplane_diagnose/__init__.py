"""crossplane-diagnose: health diagnosis for Crossplane composite resource trees."""

__version__ = "0.1.0"
