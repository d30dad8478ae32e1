class CsvBeautifierError(Exception):
    """Base class for caller-facing failures."""


class InputDecodeError(CsvBeautifierError):
    """The source bytes could not be turned into text."""
