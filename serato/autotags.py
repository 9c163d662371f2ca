from dataclasses import dataclass

from construct import Bytes, ExprAdapter

from .encoding.linebase64 import decode_with_linebreaks
from .textnumber import parse_float

# "Serato Autotags" tag: values of the automatic analysis as NUL padded ascii
# file format from https://github.com/Holzhaus/serato-tags/blob/main/docs/serato_autotags.md

HEADER = b"\x01\x01"

def AsciiNumber(size):
  return ExprAdapter(Bytes(size),
    lambda obj, ctx: parse_float(obj.split(b"\0", 1)[0].decode("ascii", errors="replace"), 0.0),
    lambda obj, ctx: "{}".format(obj).encode("ascii").ljust(size, b"\0"))

AUTOTAGS_FIELDS = [
  ("bpm", AsciiNumber(7)), # "115.00"
  ("auto_gain", AsciiNumber(7)), # "-3.257"
  ("gain_db", AsciiNumber(6)), # "0.000"
]

@dataclass(frozen=True)
class Autotags:
  bpm: float = 0.0
  auto_gain: float = 0.0
  gain_db: float = 0.0

# a field is only read if it is completely present
def parse_autotags(data):
  offset = 2 if data[:2] == HEADER else 0
  values = {}
  for name, field in AUTOTAGS_FIELDS:
    size = field.sizeof()
    if offset + size > len(data):
      break
    values[name] = field.parse(data[offset:offset+size])
    offset += size
  return Autotags(**values)

def parse_autotags_base64(text):
  return parse_autotags(decode_with_linebreaks(text))
