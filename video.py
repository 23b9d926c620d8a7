import struct

import imageio.v2 as imageio
import numpy
import PIL.Image

from exception import RenderException

FPS = 60
CODEC = "libx264"
PIXEL_FORMAT = "yuv420p"


class FrameSink:
    """Receives finished frames, in presentation order."""
    def push(self, image: PIL.Image.Image) -> None:
        raise NotImplementedError()

    def close(self) -> None:
        raise NotImplementedError()


class VideoSink(FrameSink):
    """Encodes frames as H.264 into an MP4 file, one frame per 1/60th of a second."""
    def __init__(self, path: str, width: int, height: int):
        self.path = path
        self.width = width
        self.height = height
        self.frame_count = 0
        self.__writer = None
        # Fail on an unwritable path before spending any time encoding
        try:
            open(path, "wb").close()
        except OSError as e:
            raise RenderException(f"I/O error: {e}") from e

    def push(self, image: PIL.Image.Image) -> None:
        if image.size != (self.width, self.height):
            raise RenderException(f"Encoder error: frame is {image.size[0]}x{image.size[1]}, expected {self.width}x{self.height}")
        try:
            if self.__writer is None:
                self.__writer = imageio.get_writer(
                    self.path,
                    format="FFMPEG",
                    fps=FPS,
                    codec=CODEC,
                    pixelformat=PIXEL_FORMAT,
                    macro_block_size=1,
                    ffmpeg_log_level="error",
                )
            self.__writer.append_data(numpy.asarray(image.convert("RGB")))
        except (OSError, RuntimeError, ValueError) as e:
            self._discard_writer()
            raise RenderException(f"Encoder error: {e}") from e
        self.frame_count += 1

    def close(self) -> None:
        if self.__writer is None:
            self._write_empty()
            return
        try:
            self.__writer.close()
        except (OSError, RuntimeError, ValueError) as e:
            raise RenderException(f"Encoder error: {e}") from e
        finally:
            self.__writer = None

    def _discard_writer(self) -> None:
        writer, self.__writer = self.__writer, None
        if writer is None:
            return
        try:
            writer.close()
        except (OSError, RuntimeError, ValueError):
            # The failure that got us here is the one worth reporting
            pass

    def _write_empty(self) -> None:
        # imageio only starts ffmpeg on the first frame, and ffmpeg drops a stream without packets,
        # so write the header of a video track without any samples ourselves.
        try:
            with open(self.path, "wb") as f:
                f.write(empty_mp4(self.width, self.height))
        except OSError as e:
            raise RenderException(f"I/O error: {e}") from e


def _box(kind: bytes, *payload: bytes) -> bytes:
    data = b"".join(payload)
    return struct.pack(">I4s", 8 + len(data), kind) + data


def _full_box(kind: bytes, version: int, flags: int, *payload: bytes) -> bytes:
    return _box(kind, struct.pack(">I", (version << 24) | flags), *payload)


UNITY_MATRIX = struct.pack(">9I", 0x00010000, 0, 0, 0, 0x00010000, 0, 0, 0, 0x40000000)
LANGUAGE_ENG = ((ord("e") - 0x60) << 10) | ((ord("n") - 0x60) << 5) | (ord("g") - 0x60)


def empty_mp4(width: int, height: int) -> bytes:
    """An MP4 file with a single H.264 video track holding no samples."""
    ftyp = _box(b"ftyp", b"isom", struct.pack(">I", 512), b"isom", b"iso2", b"avc1", b"mp41")
    mvhd = _full_box(b"mvhd", 0, 0,
                     struct.pack(">IIII", 0, 0, FPS, 0),
                     struct.pack(">IH10x", 0x00010000, 0x0100),
                     UNITY_MATRIX, bytes(24),
                     struct.pack(">I", 2))
    tkhd = _full_box(b"tkhd", 0, 3,  # enabled, in movie
                     struct.pack(">IIIII8xHHHH", 0, 0, 1, 0, 0, 0, 0, 0, 0),
                     UNITY_MATRIX,
                     struct.pack(">II", width << 16, height << 16))
    mdhd = _full_box(b"mdhd", 0, 0, struct.pack(">IIIIHH", 0, 0, FPS, 0, LANGUAGE_ENG, 0))
    hdlr = _full_box(b"hdlr", 0, 0, struct.pack(">I4s12x", 0, b"vide"), b"VideoHandler\0")
    vmhd = _full_box(b"vmhd", 0, 1, bytes(8))
    dinf = _box(b"dinf", _full_box(b"dref", 0, 0, struct.pack(">I", 1), _full_box(b"url ", 0, 1)))
    # Baseline profile, 4 byte NAL lengths, no parameter sets since nothing was encoded
    avcc = _box(b"avcC", bytes([1, 0x42, 0x00, 0x1E, 0xFF, 0xE0, 0x00]))
    avc1 = _box(b"avc1",
                struct.pack(">6xH", 1),
                struct.pack(">HH12xHHIIIH", 0, 0, width, height, 0x00480000, 0x00480000, 0, 1),
                bytes(32),
                struct.pack(">Hh", 0x0018, -1),
                avcc)
    stbl = _box(b"stbl",
                _full_box(b"stsd", 0, 0, struct.pack(">I", 1), avc1),
                _full_box(b"stts", 0, 0, struct.pack(">I", 0)),
                _full_box(b"stsc", 0, 0, struct.pack(">I", 0)),
                _full_box(b"stsz", 0, 0, struct.pack(">II", 0, 0)),
                _full_box(b"stco", 0, 0, struct.pack(">I", 0)))
    minf = _box(b"minf", vmhd, dinf, stbl)
    trak = _box(b"trak", tkhd, _box(b"mdia", mdhd, hdlr, minf))
    return ftyp + _box(b"moov", mvhd, trak)
