import logging
from dataclasses import dataclass

from construct import ConstructError

from .autotags import parse_autotags, parse_autotags_base64
from .beatgrid import parse_beatgrid, parse_beatgrid_base64
from .encoding.linebase64 import decode_with_linebreaks
from .markers2 import parse_markers2, parse_markers2_base64, parse_markers2_geob

# keys under which an audio tag reader hands over the serato payloads.
# id3 (mp3, aiff): GEOB frame descriptions, raw frame payload
# vorbis (flac, ogg): comment field names, line wrapped base64 text
# mp4: "----:com.serato.dj:<name>" freeform atoms, raw payload
TAG_KEYS = {
  "id3": {
    "markers": "Serato Markers2",
    "beatgrid": "Serato BeatGrid",
    "autotags": "Serato Autotags",
    "overview": "Serato Overview",
  },
  "vorbis": {
    "markers": "SERATO_MARKERS_V2",
    "beatgrid": "SERATO_BEATGRID",
    "autotags": "SERATO_AUTOTAGS",
    "overview": "SERATO_OVERVIEW",
  },
  "mp4": {
    "markers": "markersv2",
    "beatgrid": "beatgrid",
    "autotags": "autotags",
    "overview": "overview",
  },
}

TAG_PARSERS = {
  "id3": {
    "markers": parse_markers2_geob,
    "beatgrid": parse_beatgrid,
    "autotags": parse_autotags,
    "overview": bytes,
  },
  "vorbis": {
    "markers": parse_markers2_base64,
    "beatgrid": parse_beatgrid_base64,
    "autotags": parse_autotags_base64,
    "overview": decode_with_linebreaks,
  },
  "mp4": {
    "markers": parse_markers2,
    "beatgrid": parse_beatgrid,
    "autotags": parse_autotags,
    "overview": bytes,
  },
}

@dataclass(frozen=True)
class TrackTags:
  markers: object = None
  beatgrid: object = None
  autotags: object = None
  overview: bytes = None # raw waveform overview

def _lookup(tags, container, key):
  if container == "vorbis":
    # vorbis comment names are case insensitive
    key = key.upper()
    return next((value for name, value in tags.items() if name.upper() == key), None)
  if container == "mp4":
    return next((value for name, value in tags.items() if name == key or name.endswith(":com.serato.dj:" + key)), None)
  return tags.get(key)

def parse_track_tags(tags, container):
  if container not in TAG_KEYS:
    raise ValueError("unsupported tag container {}".format(container))
  found = {}
  for target, key in TAG_KEYS[container].items():
    value = _lookup(tags, container, key)
    if value is None:
      continue
    try:
      found[target] = TAG_PARSERS[container][target](value)
    except (ConstructError, ValueError, TypeError) as e:
      # a broken tag means no metadata of this kind
      logging.warning("failed to parse %s tag \"%s\": %s", container, key, e)
  if not found:
    return None
  return TrackTags(**found)
