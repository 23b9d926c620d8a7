import argparse
import sys
from typing import List, Optional

import layout
from exception import LogParseException, RenderException
from logparser import parse_log
from sequencer import FrameSequencer
from video import VideoSink


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Render a linker placement log (read from stdin) as a video.")
    parser.add_argument("output", help="path of the MP4 file to write")
    args = parser.parse_args(argv)

    try:
        sequence = parse_log(sys.stdin)
    except LogParseException as e:
        print(f"Input parse error: {e.message}", file=sys.stderr)
        sys.exit(1)

    try:
        sink = VideoSink(args.output, layout.canvas_width(sequence.nb_banks), layout.HEIGHT)
        FrameSequencer(sequence, sink).run()
    except RenderException as e:
        print(f"Rendering error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
