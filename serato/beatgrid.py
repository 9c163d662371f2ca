import logging
from dataclasses import dataclass

from construct import Array, Bytes, Float32b, Int32ub, Struct, this

from .encoding.linebase64 import decode_with_linebreaks

# "Serato BeatGrid" tag
# file format from https://github.com/Holzhaus/serato-tags/blob/main/docs/serato_beatgrid.md

BeatgridHeader = Struct(
  "version" / Bytes(2), # 01 00
  "marker_count" / Int32ub
)

BeatgridNonTerminalMarker = Struct(
  "position" / Float32b, # seconds
  "beats_till_next_marker" / Int32ub
)

BeatgridTerminalMarker = Struct(
  "position" / Float32b,
  "bpm" / Float32b
)

# only the last marker carries a bpm value, a 1 byte footer follows
BeatgridMarkers = Struct(
  "non_terminal" / Array(this._.count - 1, BeatgridNonTerminalMarker),
  "terminal" / BeatgridTerminalMarker
)

HEADER_SIZE = BeatgridHeader.sizeof()
MARKER_SIZE = BeatgridTerminalMarker.sizeof()

@dataclass(frozen=True)
class NonTerminalMarker:
  position: float
  beats_till_next_marker: int

@dataclass(frozen=True)
class TerminalMarker:
  position: float
  bpm: float

@dataclass(frozen=True)
class Beatgrid:
  markers: tuple = ()

def parse_beatgrid(data):
  if len(data) < HEADER_SIZE:
    return Beatgrid()
  header = BeatgridHeader.parse(data)
  count = header.marker_count
  if count == 0:
    return Beatgrid()
  # the footer may be missing, the markers may not
  if len(data) < HEADER_SIZE + count*MARKER_SIZE:
    logging.debug("beatgrid declares %d markers but has only %d bytes", count, len(data))
    return Beatgrid()
  parsed = BeatgridMarkers.parse(data[HEADER_SIZE:], count=count)
  markers = [NonTerminalMarker(m.position, m.beats_till_next_marker) for m in parsed.non_terminal]
  markers.append(TerminalMarker(parsed.terminal.position, parsed.terminal.bpm))
  return Beatgrid(tuple(markers))

def parse_beatgrid_base64(text):
  return parse_beatgrid(decode_with_linebreaks(text))

def effective_bpm(beatgrid):
  if len(beatgrid.markers) == 0:
    return None
  return beatgrid.markers[-1].bpm

# several markers mean tempo changes within the track
def is_dynamic(beatgrid):
  return len(beatgrid.markers) > 1
