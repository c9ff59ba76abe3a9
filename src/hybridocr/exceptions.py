# src/hybridocr/exceptions.py
class hybridOCRError(Exception):
    """Base exception for the hybridocr library."""
    pass

class ExtractionFailed(hybridOCRError):
    """Raised when any extraction stage fails.

    The message is the diagnostic text of the failing step, usually the
    combined stdout/stderr of an external tool, kept verbatim.
    """
    def __init__(self, output: str):
        super().__init__(output)
        self.output = output
