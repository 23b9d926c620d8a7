from typing import Optional


class FieldError(Exception):
    """A single malformed field; wrapped into a LogParseException with its line."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LogParseException(Exception):
    def __init__(self, line_nr: Optional[int], line: Optional[str], message: str):
        super().__init__(message)
        self.line_nr = line_nr
        self.line = line
        self.message = message

    @staticmethod
    def bad_section(line_nr: int, line: str, cause: str) -> "LogParseException":
        return LogParseException(line_nr, line, f"Bad section on line {line_nr}: {cause} ({line})")

    @staticmethod
    def bad_attempt(line_nr: int, line: str, cause: str) -> "LogParseException":
        return LogParseException(line_nr, line, f"Bad location attempt on line {line_nr}: {cause} ({line})")

    @staticmethod
    def attempt_before_section(line_nr: int, line: str) -> "LogParseException":
        return LogParseException(line_nr, line, f"Location attempt before any sections on line {line_nr} ({line})")

    @staticmethod
    def io_error(error: Exception, line_nr: int) -> "LogParseException":
        return LogParseException(line_nr, None, f"I/O error on line {line_nr}: {error}")


class RenderException(Exception):
    def __init__(self, message: str, frame: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.frame = frame

    def __str__(self) -> str:
        if self.frame is None:
            return self.message
        # "Encoder error: x" -> "Encoder error (on frame 3): x"
        kind, sep, rest = self.message.partition(":")
        if not sep:
            return f"{self.message} (on frame {self.frame})"
        return f"{kind} (on frame {self.frame}):{rest}"
