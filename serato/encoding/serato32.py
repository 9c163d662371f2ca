# Serato32 packs 3 plain bytes into 4 bytes carrying 7 payload bits each
# (bit 7 of every encoded byte is 0). It is used for colors and positions in
# the legacy Serato Markers_ tag.
# based on https://github.com/Holzhaus/triseratops (tag/serato32.rs)

from construct import Adapter, Byte

from ..color import RgbColor
from ..exceptions import LengthMismatchError

def decode(enc1, enc2, enc3, enc4):
  dec3 = (enc4 & 0x7f) | ((enc3 & 0x01) << 7)
  dec2 = ((enc3 & 0x7f) >> 1) | ((enc2 & 0x03) << 6)
  dec1 = ((enc2 & 0x7f) >> 2) | ((enc1 & 0x07) << 5)
  return dec1, dec2, dec3

def encode(dec1, dec2, dec3):
  enc4 = dec3 & 0x7f
  enc3 = ((dec3 >> 7) | (dec2 << 1)) & 0x7f
  enc2 = ((dec2 >> 6) | (dec1 << 2)) & 0x7f
  enc1 = dec1 >> 5
  return enc1, enc2, enc3, enc4

def decode_buffer(data):
  if len(data) % 4 != 0:
    raise LengthMismatchError("Serato32", 4, len(data))
  output = bytearray()
  for i in range(0, len(data), 4):
    output.extend(decode(*data[i:i+4]))
  return bytes(output)

def encode_buffer(data):
  if len(data) % 3 != 0:
    raise LengthMismatchError("Serato32", 3, len(data))
  output = bytearray()
  for i in range(0, len(data), 3):
    output.extend(encode(*data[i:i+3]))
  return bytes(output)

class Serato32IntAdapter(Adapter):
  def _encode(self, obj, context, path):
    return list(encode((obj >> 16) & 0xff, (obj >> 8) & 0xff, obj & 0xff))
  def _decode(self, obj, context, path):
    dec1, dec2, dec3 = decode(*obj)
    return (dec1 << 16) | (dec2 << 8) | dec3
Serato32Int = Serato32IntAdapter(Byte[4]) # 24 bit value, e.g. a position in ms

class Serato32ColorAdapter(Adapter):
  def _encode(self, obj, context, path):
    return list(encode(obj.r, obj.g, obj.b))
  def _decode(self, obj, context, path):
    return RgbColor(*decode(*obj))
Serato32Color = Serato32ColorAdapter(Byte[4])

def decode_u32(data, offset=0):
  return Serato32Int.parse(data[offset:offset+4])

def encode_u32(value):
  return Serato32Int.build(value)

def decode_color(data, offset=0):
  return Serato32Color.parse(data[offset:offset+4])

def encode_color(color):
  return Serato32Color.build(color)
