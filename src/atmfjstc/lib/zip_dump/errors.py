class TruncatedFieldError(Exception):
    """
    Raised when the data ends (or the enclosing extra field chunk ends) before a field could be read completely.

    This is not a fatal condition: it stops the decoding of the current record or chunk, and the dump resumes from
    wherever the data left off.
    """
    label: str
    position: int

    def __init__(self, label: str, position: int):
        self.label = label
        self.position = position

        super().__init__(f"Data ends before {label} (at position {position})")
