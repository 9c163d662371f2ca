import re

# serato writes several numeric fields as text. like the application we only
# look at the leading number and ignore whatever follows it ("128.00", "320.0kbps")

_float_prefix = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_int_prefix = re.compile(r"\s*([+-]?\d+)")

def parse_float(text, default=None):
  match = _float_prefix.match(text)
  if match is None:
    return default
  return float(match.group(1))

def parse_int(text, default=None):
  match = _int_prefix.match(text)
  if match is None:
    return default
  return int(match.group(1))
