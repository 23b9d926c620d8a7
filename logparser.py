import re
import sys
from typing import Iterable

from exception import FieldError, LogParseException
from sequence import MEM_TYPES, Location, Section, Sequence

# "TYPE @ bank:addr & align_mask + align_ofs ] size name", only one blank before the name
SECTION_REGEX = re.compile(r"""
    ^([^ \t@]+)
    [ \t]*@[ \t]*([^ \t&]+)
    [ \t]*&[ \t]*([^ \t+]+)
    [ \t]*\+[ \t]*([^ \t\]]+)
    [ \t]*\][ \t]*([^ \t]+)
    [ \t](.*)$""", re.VERBOSE)
HEX_REGEX = re.compile(r'\+?[0-9A-Fa-f]+')
DEC_REGEX = re.compile(r'\+?[0-9]+')


def _parse_int(text: str, bits: int, pattern: re.Pattern, base: int) -> int:
    if text == "":
        raise FieldError("cannot parse integer from empty string")
    if not pattern.fullmatch(text):
        raise FieldError("invalid digit found in string")
    value = int(text, base)
    if value >= 1 << bits:
        raise FieldError("number too large to fit in target type")
    return value


def parse_hex(text: str, bits: int) -> int:
    return _parse_int(text, bits, HEX_REGEX, 16)


def parse_dec(text: str, bits: int) -> int:
    return _parse_int(text, bits, DEC_REGEX, 10)


def parse_location(text: str) -> Location:
    bank, sep, addr = text.partition(":")
    if not sep:
        raise FieldError("Missing colon")
    try:
        bank = parse_hex(bank.strip(), 32)
    except FieldError as e:
        raise FieldError(f"Bad bank: {e.message}")
    try:
        addr = parse_hex(addr.strip(), 16)
    except FieldError as e:
        raise FieldError(f"Bad addr: {e.message}")
    return Location(bank, addr)


def parse_section(text: str) -> Section:
    """Parse what follows the opening `[` of a section line."""
    m = SECTION_REGEX.match(text)
    if not m:
        raise FieldError("Syntax error")
    mem_type, location, align_mask, align_ofs, size, name = m.groups()
    if mem_type not in MEM_TYPES:
        raise FieldError(f"Bad type: unknown memory type {mem_type}")
    try:
        location = parse_location(location)
    except FieldError as e:
        raise FieldError(f"Bad location: {e.message}")
    try:
        align_mask = parse_hex(align_mask, 16)
    except FieldError as e:
        raise FieldError(f"Bad align mask: {e.message}")
    try:
        align_ofs = parse_hex(align_ofs, 16)
    except FieldError as e:
        raise FieldError(f"Bad align ofs: {e.message}")
    try:
        size = parse_dec(size, 16)
    except FieldError as e:
        raise FieldError(f"Bad size: {e.message}")
    if size == 0:
        raise FieldError("Bad size: number would be zero for non-zero type")
    return Section(mem_type, location, align_mask, align_ofs, size, name)


def parse_log(lines: Iterable[str], *, progress: bool = True) -> Sequence:
    if progress:
        print("Parsing input...", end="\r", file=sys.stderr)
    sequence = Sequence()
    section_id = None
    lines = iter(lines)
    line_nr = 0
    while True:
        line_nr += 1
        try:
            line = next(lines)
        except StopIteration:
            break
        except (OSError, UnicodeDecodeError) as e:
            raise LogParseException.io_error(e, line_nr) from e

        # Trailing whitespace can be part of a section name, so only strip the left side
        line = line.lstrip()
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        if not line:
            continue

        if line.startswith("["):
            try:
                section = parse_section(line[1:])
            except FieldError as e:
                raise LogParseException.bad_section(line_nr, line, e.message)
            section_id = sequence.add_section(section)
        else:
            try:
                location = parse_location(line)
            except FieldError as e:
                raise LogParseException.bad_attempt(line_nr, line, e.message)
            if section_id is None:
                raise LogParseException.attempt_before_section(line_nr, line)
            sequence.add_attempt(location, section_id)
    if progress:
        print("Parsing input - Done.", file=sys.stderr)
    return sequence
