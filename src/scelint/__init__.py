"""scelint - lint and compile SIMP compliance profile data."""

__version__ = "1.0.0"
