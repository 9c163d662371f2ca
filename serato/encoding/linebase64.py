# FLAC and Ogg files carry Serato tags in Vorbis comments as base64 without
# padding, wrapped with a linefeed after every 72 characters.

import base64
import re

LINE_LENGTH = 72

_whitespace = re.compile(r"\s")
_alphabet = re.compile(r"^[A-Za-z0-9+/]*$")

def strip_whitespace(text):
  return _whitespace.sub("", text)

def encode_with_linebreaks(data):
  text = base64.b64encode(data).decode("ascii").rstrip("=")
  return "\n".join(text[i:i+LINE_LENGTH] for i in range(0, len(text), LINE_LENGTH))

# the line length is a write-time convention only, any wrapping is accepted.
# a dangling last character (length 1 mod 4) carries no full byte and is dropped
def decode_with_linebreaks(text):
  text = strip_whitespace(text)
  if len(text) % 4 == 1:
    text = text[:-1]
  text += "=" * ((4 - len(text) % 4) % 4)
  return base64.b64decode(text)

def is_serato_base64(text):
  cleaned = text.replace("\n", "")
  return len(cleaned) > 0 and _alphabet.match(cleaned) is not None
