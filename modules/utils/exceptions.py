class StaleLayoutError(RuntimeError):
    """Raised when a layout snapshot is queried after it has been replaced."""

    def __init__(self, generation: int, current: int | None = None):
        message = f"Layout snapshot {generation} was retired"
        if current is not None:
            message += f" (current generation is {current})"
        super().__init__(message)
        self.generation = generation
        self.current = current


class UnsupportedTextDirectionError(ValueError):
    """Raised when a row's glyph edges are not in left-to-right order."""
    def __init__(self, message, block_index=None):
        super().__init__(message)
        self.block_index = block_index
