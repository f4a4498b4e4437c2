"""reqbundle: package Python dependencies for deployment."""

__version__ = "0.1.0"
