from typing import Tuple

# The canvas is: bank, spacer, bank, spacer, ..., bank
HEIGHT = 512
MAX_WIDTH = HEIGHT * 2  # 2:1 is an acceptable ratio
SPACER_WIDTH = 2
MAX_BANK_WIDTH = 32 - SPACER_WIDTH
BANK_SIZE = 0x4000
BYTES_PER_ROW = BANK_SIZE // HEIGHT


def bank_width(nb_banks: int) -> int:
    # Widths have to stay even, so round down
    return min(((MAX_WIDTH // nb_banks) & ~1) - SPACER_WIDTH, MAX_BANK_WIDTH)


def canvas_width(nb_banks: int) -> int:
    return (bank_width(nb_banks) + SPACER_WIDTH) * nb_banks - SPACER_WIDTH


def bank_x(bank: int, width: int) -> int:
    return bank * (width + SPACER_WIDTH)


def byte_rows(addr: int, nb_bytes: int) -> Tuple[int, int]:
    """First and last pixel row (inclusive) covered by nb_bytes at addr.

    Only the offset inside the bank counts, and the range is capped at the end of the bank.
    """
    addr %= BANK_SIZE
    first_row = addr // BYTES_PER_ROW
    last_row = min(addr + nb_bytes - 1, BANK_SIZE - 1) // BYTES_PER_ROW
    return first_row, last_row


def bank_rect(nb_banks: int, bank: int, addr: int, nb_bytes: int) -> Tuple[int, int, int, int]:
    width = bank_width(nb_banks)
    x = bank_x(bank, width)
    first_row, last_row = byte_rows(addr, nb_bytes)
    return x, first_row, x + width - 1, last_row
