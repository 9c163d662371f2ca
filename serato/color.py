from dataclasses import dataclass

from construct import Adapter, Byte

@dataclass(frozen=True)
class RgbColor:
  r: int
  g: int
  b: int

  def __str__(self):
    return "#{:02x}{:02x}{:02x}".format(self.r, self.g, self.b)

@dataclass(frozen=True)
class ArgbColor:
  a: int
  r: int
  g: int
  b: int

  def __str__(self):
    return "#{:02x}{:02x}{:02x}{:02x}".format(self.a, self.r, self.g, self.b)

class RgbColorAdapter(Adapter):
  def _encode(self, obj, context, path):
    return [obj.r, obj.g, obj.b]
  def _decode(self, obj, context, path):
    return RgbColor(*obj)
RgbColorBytes = RgbColorAdapter(Byte[3])

class ArgbColorAdapter(Adapter):
  def _encode(self, obj, context, path):
    return [obj.a, obj.r, obj.g, obj.b]
  def _decode(self, obj, context, path):
    return ArgbColor(*obj)
ArgbColorBytes = ArgbColorAdapter(Byte[4])
