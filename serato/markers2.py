import io
import logging
from dataclasses import dataclass
from operator import attrgetter

from construct import ConstructError, ExprAdapter, Flag, Float64b, GreedyBytes, Int8ub, Int32ub, NullTerminated, Padding, Prefixed, PrefixedArray, Struct, Switch, this

from .color import ArgbColorBytes, RgbColorBytes
from .encoding.linebase64 import decode_with_linebreaks

# "Serato Markers2" tag: cue points, saved loops, flips, track color and bpm lock
# file format from https://github.com/Holzhaus/serato-tags/blob/main/docs/serato_markers2.md

HEADER = b"\x01\x01"

# utf-8, terminated by NUL or the end of the entry
Markers2Name = ExprAdapter(NullTerminated(GreedyBytes, require=False),
  lambda obj, ctx: obj.decode("utf-8", errors="replace"),
  lambda obj, ctx: obj.encode("utf-8"))

Markers2Entry = Struct(
  "type" / ExprAdapter(NullTerminated(GreedyBytes),
    lambda obj, ctx: obj.decode("latin-1"),
    lambda obj, ctx: obj.encode("latin-1")),
  "data" / Prefixed(Int32ub, GreedyBytes)
)

Markers2Color = Struct(
  Padding(1),
  "color" / RgbColorBytes
)

Markers2BpmLock = Struct(
  "locked" / Flag
)

Markers2Cue = Struct(
  Padding(1),
  "index" / Int8ub,
  "position" / Int32ub, # ms
  Padding(1),
  "color" / RgbColorBytes,
  Padding(2),
  "name" / Markers2Name # up to 51 bytes, may be missing
)

Markers2Loop = Struct(
  Padding(1),
  "index" / Int8ub,
  "start_position" / Int32ub, # ms
  "end_position" / Int32ub, # ms
  Padding(4), # always 0xffffffff
  "color" / ArgbColorBytes,
  Padding(3),
  "locked" / Flag,
  "name" / Markers2Name
)

FlipActionJump = Struct(
  "source_position" / Float64b, # seconds
  "target_position" / Float64b
)

FlipActionCensor = Struct(
  "source_position" / Float64b,
  "target_position" / Float64b,
  "speed_factor" / Float64b # -1.0 for reverse playback
)

Markers2FlipAction = Struct(
  "type" / Int8ub,
  "content" / Prefixed(Int32ub, Switch(this.type, {
    0: FlipActionJump,
    1: FlipActionCensor,
  }, default=GreedyBytes))
)

Markers2Flip = Struct(
  Padding(1),
  "index" / Int8ub,
  "enabled" / Flag,
  "name" / Markers2Name,
  "loop" / Flag,
  "actions" / PrefixedArray(Int32ub, Markers2FlipAction)
)

@dataclass(frozen=True)
class CuePoint:
  index: int
  position: int # ms
  color: object
  name: str = None

@dataclass(frozen=True)
class Loop:
  index: int
  start_position: int # ms
  end_position: int # ms
  color: object
  locked: bool = False
  name: str = None

@dataclass(frozen=True)
class FlipJump:
  source_position: float # seconds
  target_position: float

@dataclass(frozen=True)
class FlipCensor:
  source_position: float
  target_position: float
  speed_factor: float

@dataclass(frozen=True)
class Flip:
  index: int
  enabled: bool
  name: str
  loop: bool
  actions: tuple = ()

@dataclass(frozen=True)
class Markers2:
  cue_points: tuple = ()
  loops: tuple = ()
  flips: tuple = ()
  track_color: object = None
  bpm_lock: bool = None

def _cue(data):
  parsed = Markers2Cue.parse(data)
  return CuePoint(parsed.index, parsed.position, parsed.color, parsed.name or None)

def _loop(data):
  parsed = Markers2Loop.parse(data)
  return Loop(parsed.index, parsed.start_position, parsed.end_position, parsed.color, parsed.locked, parsed.name or None)

def _flip_action(action):
  if action.type == 0:
    return FlipJump(action.content.source_position, action.content.target_position)
  if action.type == 1:
    return FlipCensor(action.content.source_position, action.content.target_position, action.content.speed_factor)
  logging.debug("ignoring flip action type %d", action.type)
  return None

def _flip(data):
  parsed = Markers2Flip.parse(data)
  actions = (_flip_action(action) for action in parsed.actions)
  return Flip(parsed.index, parsed.enabled, parsed.name, parsed.loop, tuple(a for a in actions if a is not None))

def parse_markers2(data):
  cue_points = []
  loops = []
  flips = []
  track_color = None
  bpm_lock = None

  stream = io.BytesIO(data)
  if data[:2] == HEADER:
    stream.seek(2)
  while stream.tell() < len(data):
    if data[stream.tell()] == 0:
      break # end of entries, the rest is padding
    offset = stream.tell()
    try:
      entry = Markers2Entry.parse_stream(stream)
    except ConstructError:
      logging.debug("truncated markers2 entry at offset %d", offset)
      break
    try:
      if entry.type == "CUE":
        cue_points.append(_cue(entry.data))
      elif entry.type == "LOOP":
        loops.append(_loop(entry.data))
      elif entry.type == "FLIP":
        flips.append(_flip(entry.data))
      elif entry.type == "COLOR":
        track_color = Markers2Color.parse(entry.data).color
      elif entry.type == "BPMLOCK":
        bpm_lock = Markers2BpmLock.parse(entry.data).locked
      else:
        logging.debug("ignoring markers2 entry %s (%d bytes)", entry.type, len(entry.data))
    except ConstructError as e:
      logging.warning("malformed markers2 %s entry at offset %d: %s", entry.type, offset, e)
      break

  sort_key = attrgetter("index")
  return Markers2(
    cue_points=tuple(sorted(cue_points, key=sort_key)),
    loops=tuple(sorted(loops, key=sort_key)),
    flips=tuple(sorted(flips, key=sort_key)),
    track_color=track_color,
    bpm_lock=bpm_lock)

# the encoded length written by serato is sometimes one character too long
def decode_markers2_base64(text):
  return decode_with_linebreaks(text)

def parse_markers2_base64(text):
  return parse_markers2(decode_markers2_base64(text))

# ID3 GEOB frame: 01 01 header, base64 content, NUL padding up to 470 bytes
def parse_markers2_geob(payload):
  if len(payload) < 2:
    return Markers2()
  start = 2 if payload[:2] == HEADER else 0
  content = payload[start:].rstrip(b"\x00")
  return parse_markers2_base64(content.decode("ascii", errors="ignore"))
