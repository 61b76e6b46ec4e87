class SmilCheckError(Exception):
    """Base error for fatal smilcheck failures."""


class UnzipError(SmilCheckError):
    """Raised when an EPUB archive cannot be extracted."""


class PackageDocumentError(SmilCheckError):
    """Raised when container.xml or the OPF package document is missing or unusable."""


class SmilDocumentError(SmilCheckError):
    """Raised when a SMIL document cannot be read or parsed."""
