class ImageMergingError(Exception):
    """Base class for failures raised by the image merging pipeline."""


class NotFoundError(ImageMergingError, FileNotFoundError):
    """A document or image location does not exist in storage."""


class DecodeError(ImageMergingError):
    """Stored bytes could not be decoded as an image."""


class ParseError(ImageMergingError, ValueError):
    """An annotation document is malformed or misses required fields."""


class EmptyGroupError(ImageMergingError, ValueError):
    """A merge was requested for a group without any image."""


class EncodingError(ImageMergingError, UnicodeError):
    """An artifact could not be encoded for writing."""


class WriteError(ImageMergingError, OSError):
    """An artifact could not be written to its destination."""
