from dataclasses import dataclass, field
from typing import List

MEM_TYPES = ("ROM0", "ROMX", "VRAM", "SRAM", "WRAM0", "WRAMX", "OAM", "HRAM")
ROM_TYPES = ("ROM0", "ROMX")

FLOATING_ADDR = 0xFFFF
FLOATING_BANK = 0xFFFFFFFF


def next_power_of_two(value: int) -> int:
    result = 1
    while result < value:
        result <<= 1
    return result


@dataclass(frozen=True)
class Location:
    bank: int
    addr: int

    def is_floating(self) -> bool:
        return self.addr == FLOATING_ADDR

    def is_floating_bank(self) -> bool:
        return self.bank == FLOATING_BANK

    def __repr__(self) -> str:
        return f"{self.bank:02x}:{self.addr:04x}"


@dataclass(frozen=True)
class Section:
    mem_type: str
    location: Location
    align_mask: int
    align_ofs: int
    size: int
    name: str

    def __post_init__(self):
        if self.mem_type not in MEM_TYPES:
            raise ValueError(f"Unknown memory type {self.mem_type}")
        if self.size <= 0:
            raise ValueError(f"Section {self.name} has no size")

    def is_floating(self) -> bool:
        return self.location.is_floating()

    def is_floating_bank(self) -> bool:
        return self.location.is_floating_bank()


@dataclass(frozen=True)
class Attempt:
    location: Location
    section_id: int


@dataclass
class Sequence:
    """Every ROM placement attempt of a link, in log order.

    Attempts refer to their section by index into `sections`, so consecutive
    attempts on one section share the same `section_id`.
    """
    nb_banks: int = 2
    attempts: List[Attempt] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)

    def __post_init__(self):
        last_id = -1
        for attempt in self.attempts:
            if not (0 <= attempt.section_id < len(self.sections)):
                raise ValueError(f"Attempt references unknown section {attempt.section_id}")
            if attempt.section_id < last_id:
                raise ValueError(f"Attempts for section {attempt.section_id} are not contiguous")
            last_id = attempt.section_id

    def add_section(self, section: Section) -> int:
        self.sections.append(section)
        return len(self.sections) - 1

    def add_attempt(self, location: Location, section_id: int) -> bool:
        """Record an attempt, unless it targets something other than ROM."""
        if self.attempts and section_id < self.attempts[-1].section_id:
            raise ValueError(f"Attempts for section {section_id} are not contiguous")
        mem_type = self.sections[section_id].mem_type
        if mem_type not in ROM_TYPES:
            return False
        if mem_type == "ROMX" and location.bank >= self.nb_banks:
            self.nb_banks = next_power_of_two(location.bank + 1)
        self.attempts.append(Attempt(location, section_id))
        return True

    def section(self, attempt: Attempt) -> Section:
        return self.sections[attempt.section_id]
