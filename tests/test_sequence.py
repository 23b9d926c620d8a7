import unittest
from sequence import Location, Section, Sequence, next_power_of_two


class TestSequence(unittest.TestCase):
    def _sequence(self, mem_type: str) -> Sequence:
        s = Sequence()
        s.add_section(Section(mem_type, Location(0xFFFFFFFF, 0xFFFF), 0, 0, 16, "TEST"))
        return s

    def test_next_power_of_two(self):
        self.assertEqual(next_power_of_two(1), 1)
        self.assertEqual(next_power_of_two(5), 8)
        self.assertEqual(next_power_of_two(8), 8)
        self.assertEqual(next_power_of_two(0x81), 0x100)

    def test_bank_count(self):
        s = self._sequence("ROMX")
        self.assertEqual(s.nb_banks, 2)
        s.add_attempt(Location(1, 0x4000), 0)
        self.assertEqual(s.nb_banks, 2)
        s.add_attempt(Location(5, 0x4000), 0)
        self.assertEqual(s.nb_banks, 8)
        s.add_attempt(Location(3, 0x4000), 0)
        self.assertEqual(s.nb_banks, 8)
        s.add_attempt(Location(8, 0x4000), 0)
        self.assertEqual(s.nb_banks, 16)

    def test_bank_count_power_of_two(self):
        s = self._sequence("ROMX")
        s.add_attempt(Location(4, 0x4000), 0)
        # Bank 4 needs a fifth column
        self.assertEqual(s.nb_banks, 8)

    def test_rom0_keeps_bank_count(self):
        s = self._sequence("ROM0")
        self.assertTrue(s.add_attempt(Location(9, 0x0000), 0))
        self.assertEqual(s.nb_banks, 2)
        self.assertEqual(len(s.attempts), 1)

    def test_only_rom(self):
        for mem_type in ("VRAM", "SRAM", "WRAM0", "WRAMX", "OAM", "HRAM"):
            s = self._sequence(mem_type)
            self.assertFalse(s.add_attempt(Location(9, 0xC000), 0))
            self.assertEqual(s.attempts, [])
            self.assertEqual(s.nb_banks, 2)

    def test_floating(self):
        s = self._sequence("ROMX")
        self.assertTrue(s.sections[0].is_floating())
        self.assertTrue(s.sections[0].is_floating_bank())
        self.assertFalse(Location(1, 0x4000).is_floating())
        self.assertFalse(Location(1, 0x4000).is_floating_bank())
        self.assertTrue(Location(1, 0xFFFF).is_floating())
        self.assertFalse(Location(1, 0xFFFF).is_floating_bank())

    def test_bad_section(self):
        with self.assertRaises(ValueError):
            Section("ROMX", Location(0, 0), 0, 0, 0, "EMPTY")
        with self.assertRaises(ValueError):
            Section("ROMY", Location(0, 0), 0, 0, 1, "TYPE")

    def test_contiguous(self):
        s = self._sequence("ROMX")
        s.add_section(Section("ROMX", Location(1, 0x4000), 0, 0, 16, "TEST2"))
        s.add_attempt(Location(1, 0x4000), 1)
        with self.assertRaises(ValueError):
            s.add_attempt(Location(1, 0x4000), 0)
