class InvariantViolation(ValueError):
    """A domain rule about blocks, slugs or the landing block was broken."""
