import sys
from typing import Optional

from canvas import Canvas
from exception import RenderException
from sequence import Sequence
from video import FrameSink


class FrameSequencer:
    def __init__(self, sequence: Sequence, sink: FrameSink, *, progress: bool = True):
        self.__sequence = sequence
        self.__sink = sink
        self.__progress = progress
        self.canvas: Optional[Canvas] = None

    def run(self) -> int:
        """Emit one frame per attempt, and return how many were emitted.

        Each attempt is shown in red over everything settled so far. An attempt gets
        settled (green) once the next one belongs to another section, or when it is the last.
        """
        self._log("Rendering...", end="\r")
        attempts = self.__sequence.attempts
        self.canvas = Canvas(self.__sequence.nb_banks)
        for index, attempt in enumerate(attempts):
            self._log(f"Rendering... {index} / {len(attempts)}", end="\r")
            section = self.__sequence.section(attempt)
            frame = self.canvas.overlay(section, attempt.location)
            try:
                self.__sink.push(frame)
            except RenderException as e:
                if e.frame is None:
                    e.frame = index
                raise

            next_attempt = attempts[index + 1] if index + 1 < len(attempts) else None
            if next_attempt is None or next_attempt.section_id != attempt.section_id:
                self.canvas.settle(section, attempt.location)

        self.__sink.close()
        self._log("Rendering... - Done.      ")
        return len(attempts)

    def _log(self, message: str, end: str = "\n") -> None:
        if self.__progress:
            print(message, end=end, file=sys.stderr)
