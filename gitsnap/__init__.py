"""gitsnap — snapshot git repository provenance and restore it elsewhere."""

__version__ = "0.1.0"
