class InvalidInput(ValueError):
    """A life-table column or scalar argument violates its input contract."""
