"""Error kinds shared by the dataset, training and detection stages."""

from __future__ import annotations


class FileAccessError(OSError):
    """A required file or directory could not be read or created.

    Also raised when a directory scan exhausts every pattern without a match.
    """


class MalformedAnnotationLine(ValueError):
    """An annotation line whose corner list is not four integers."""

    def __init__(self, line: str, reason: str, line_number: int | None = None):
        self.line = line
        self.reason = reason
        self.line_number = line_number
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason} ({line!r})")


class EmptyDescriptor(LookupError):
    """No keypoints were found in a patch, so it has no descriptor."""


class EmptyProposalSet(LookupError):
    """No region proposal survived filtering for an image."""
