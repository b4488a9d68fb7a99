"""Process exit codes used when no mapping rule decides the outcome."""

# Success (2XX without a matching rule)
SUCCESS = 0

# Startup, parse, transport, decode and unmapped-status failures
GENERAL_ERROR = 1


def is_valid_exit_code(code: int) -> bool:
    """Return True if code can be configured as a rule's exit code.

    Args:
        code: Parsed exit code from a mapping entry

    Returns:
        Whether the code is a non-negative integer
    """
    return code >= 0
