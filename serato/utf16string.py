from construct import ExprAdapter, GreedyBytes

# serato stores text as utf-16 big endian without byte order mark
# an odd trailing byte is dropped, embedded NULs are removed
def decode_utf16be(data):
  data = bytes(data[:len(data) - len(data) % 2])
  return data.decode("utf-16-be", errors="replace").replace("\0", "")

def encode_utf16be(text):
  return text.encode("utf-16-be")

Utf16String = ExprAdapter(GreedyBytes,
  lambda obj, ctx: decode_utf16be(obj),
  lambda obj, ctx: encode_utf16be(obj))
