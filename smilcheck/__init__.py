"""Post-hoc checks for EPUB 3 media overlay (SMIL) alignments."""

__version__ = "0.1.0"
