"""Receipt number formatting"""

RECEIPT_NUMBER_WIDTH = 8


def format_receipt_number(value: int, width: int = RECEIPT_NUMBER_WIDTH) -> str:
    """
    Render a counter value as a fixed-width zero-padded receipt number.

    Fixed width keeps lexicographic order equal to numeric order, which
    receipt listings rely on when sorting.

    Example:
        42 → "00000042"
    """
    if value <= 0:
        raise ValueError(f"Receipt counter value must be positive, got {value}")
    number = str(value).zfill(width)
    if len(number) > width:
        raise OverflowError(f"Receipt counter {value} exceeds {width} digits")
    return number
