import PIL.Image
import PIL.ImageDraw

import layout
from exception import RenderException
from sequence import Location, Section

BACKGROUND_COLOR = (255, 255, 255)
SPACER_COLOR = (0, 0, 0)
FILLED_COLOR = (0, 255, 0)
OVERLAY_COLOR = (255, 0, 0)


class Canvas:
    """The committed placements so far, one column per bank.

    Only `settle` writes to `image`; `overlay` draws on a copy.
    """
    def __init__(self, nb_banks: int):
        self.nb_banks = nb_banks
        self.bank_width = layout.bank_width(nb_banks)
        if self.bank_width < 0:
            raise RenderException(f"Layout error: {nb_banks} banks do not fit in {layout.MAX_WIDTH} pixels")
        self.width = layout.canvas_width(nb_banks)
        self.height = layout.HEIGHT
        self.image = PIL.Image.new("RGB", (self.width, self.height), BACKGROUND_COLOR)

        draw = PIL.ImageDraw.Draw(self.image)
        for bank in range(1, nb_banks):
            spacer_end = layout.bank_x(bank, self.bank_width) - 1
            draw.rectangle((spacer_end - layout.SPACER_WIDTH + 1, 0, spacer_end, self.height - 1), fill=SPACER_COLOR)

    def _draw_rect(self, image: PIL.Image.Image, section: Section, location: Location, color) -> None:
        assert location.bank < self.nb_banks, f"bank {location.bank:02x} outside of the {self.nb_banks} banks canvas"
        # Past 256 banks the columns are only spacers, there is nothing to fill
        if self.bank_width == 0:
            return
        rect = layout.bank_rect(self.nb_banks, location.bank, location.addr, section.size)
        PIL.ImageDraw.Draw(image).rectangle(rect, fill=color)

    def settle(self, section: Section, location: Location) -> None:
        self._draw_rect(self.image, section, location, FILLED_COLOR)

    def overlay(self, section: Section, location: Location) -> PIL.Image.Image:
        image = self.image.copy()
        self._draw_rect(image, section, location, OVERLAY_COLOR)
        return image
