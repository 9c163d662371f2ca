import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone

from construct import ConstructError, Flag, GreedyBytes, Int16ub, Int32ub

from .chunk import walk_chunks
from .textnumber import parse_float, parse_int
from .utf16string import Utf16String, decode_utf16be

# _Serato_/database V2
# the first character of a tag names the type of its payload
# see https://github.com/mixxxdj/mixxx/wiki/Serato-Database-Format

DATABASE_FILENAME = "database V2"

FIELD_TYPES = {
  "t": Utf16String, # text
  "p": Utf16String, # path
  "b": Flag,
  "u": Int32ub,
  "s": Int16ub,
}

@dataclass(frozen=True)
class DatabaseTrack:
  file_path: str
  title: str = None
  artist: str = None
  album: str = None
  genre: str = None
  key: str = None
  bpm: float = None
  length: float = None # seconds
  bitrate: int = None # kbps
  sample_rate: int = None # Hz
  file_type: str = None
  beatgrid_locked: bool = None
  missing: bool = None
  date_added: datetime = None
  file_time: datetime = None
  comment: str = None
  grouping: str = None
  composer: str = None
  label: str = None
  year: int = None

def decode_field(tag, data):
  if len(data) == 0:
    return None
  field_type = FIELD_TYPES.get(tag[:1], GreedyBytes)
  try:
    return field_type.parse(data)
  except ConstructError:
    return None # integer field shorter than its type

def _number(value):
  return value or None # 0 counts as unset

def _float(text):
  return _number(parse_float(text))

def _int(text):
  return _number(parse_int(text))

# newer versions write the length as "mm:ss.xx"
def _length(text):
  minutes, sep, seconds = text.partition(":")
  if not sep:
    return _float(text)
  minutes = parse_int(minutes)
  seconds = parse_float(seconds)
  if minutes is None or seconds is None:
    return None
  return _number(minutes*60 + seconds)

# "44100" or "44.1k"
def _sample_rate(text):
  value = parse_float(text)
  if value is None:
    return None
  if text.strip().lower().endswith("k"):
    value *= 1000
  return _number(int(round(value)))

def _timestamp(value):
  if value <= 0:
    return None
  return datetime.fromtimestamp(value, tz=timezone.utc)

TRACK_FIELDS = {
  "pfil": ("file_path", str),
  "tsng": ("title", str),
  "tart": ("artist", str),
  "talb": ("album", str),
  "tgen": ("genre", str),
  "tkey": ("key", str),
  "tbpm": ("bpm", _float),
  "tlen": ("length", _length),
  "tbit": ("bitrate", _int),
  "tsmp": ("sample_rate", _sample_rate),
  "ttyp": ("file_type", str),
  "bbgl": ("beatgrid_locked", bool),
  "bmis": ("missing", bool),
  "uadd": ("date_added", _timestamp),
  "utme": ("file_time", _timestamp),
  "tcom": ("comment", str),
  "tgrp": ("grouping", str),
  "tcmp": ("composer", str),
  "tlbl": ("label", str),
  "ttyr": ("year", _int),
}

def parse_track(chunks):
  fields = {}
  for chunk in chunks:
    if chunk.tag not in TRACK_FIELDS:
      continue
    value = decode_field(chunk.tag, chunk.payload)
    if value is None:
      continue
    name, convert = TRACK_FIELDS[chunk.tag]
    value = convert(value)
    if value is not None:
      fields[name] = value
  if not fields.get("file_path"):
    return None # cannot be correlated to a file
  return DatabaseTrack(**fields)

def parse_database_version(data):
  for chunk in walk_chunks(data):
    if chunk.tag == "vrsn":
      return decode_utf16be(chunk.payload)
  return None

def parse_database(data):
  tracks = []
  dropped = 0
  for chunk in walk_chunks(data, containers=("otrk",)):
    if chunk.tag != "otrk":
      continue
    track = parse_track(chunk.children)
    if track is None:
      dropped += 1
      continue
    tracks.append(track)
  if dropped > 0:
    logging.debug("dropped %d database entries without file path", dropped)
  return tracks

_separators = "/" + os.sep

# serato stores paths relative to the drive root, compare without leading separators
def _normalize_path(path):
  return os.path.normpath(path).lower().lstrip(_separators)

# suffix match on whole path components only
def _is_path_suffix(path, suffix):
  if path == suffix:
    return True
  return path.endswith(suffix) and path[-len(suffix)-1] in _separators

class SeratoDatabase(dict):
  def __init__(self):
    super().__init__(version=None, tracks=[])

  def get_track(self, file_path):
    wanted = _normalize_path(file_path)
    for track in self["tracks"]:
      path = _normalize_path(track.file_path)
      if _is_path_suffix(path, wanted) or _is_path_suffix(wanted, path):
        return track
    raise KeyError("SeratoDatabase: track {} not found".format(file_path))

  def load_buffer(self, data):
    logging.debug("Loading database from buffer")
    self["version"] = parse_database_version(data)
    self["tracks"] = parse_database(data)
    logging.info("Loaded database version %s with %d tracks", self["version"], len(self["tracks"]))

  def load_file(self, filename):
    logging.info("Loading database \"%s\"", filename)
    with open(filename, "rb") as f:
      data = f.read()
    self.load_buffer(data)
