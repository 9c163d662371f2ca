import logging
import os
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from construct import ConstructError, Enum, Int8ub, Int32ub

from .chunk import find_chunk, walk_chunks
from .utf16string import decode_utf16be

# _Serato_/History/history.database lists the sessions,
# _Serato_/History/Sessions/<index>.session holds the played tracks.
# containers are ascii tags, fields inside "adat" use plain integer tags.

HistoryTag = Enum(Int32ub,
  oses = 0x6f736573, # session
  oent = 0x6f656e74, # entry
  otrk = 0x6f74726b, # track
  adat = 0x61646174, # attributes
  index = 1,
  file_path = 2,
  title = 6,
  artist = 7,
  bpm = 15,
  start_time = 28, # seconds since epoch
  deck = 31,
  session_date = 41,
  play_time = 45, # seconds since epoch, written when the track is finished
  played = 50
)

HISTORY_CONTAINERS = ("oses", "oent", "otrk", "adat")

def _timestamp(value):
  return datetime.fromtimestamp(value, tz=timezone.utc)

FIELD_TYPES = {
  "index": Int32ub,
  "bpm": Int32ub,
  "deck": Int32ub,
  "played": Int8ub,
  "start_time": Int32ub,
  "play_time": Int32ub,
}

FIELD_CONVERTERS = {
  "start_time": _timestamp,
  "play_time": _timestamp,
}

@dataclass(frozen=True)
class HistorySong:
  title: str = ""
  artist: str = ""
  file_path: str = ""
  bpm: int = None
  start_time: datetime = None
  play_time: datetime = None
  played: bool = False
  deck: int = 0

  # started but not marked as finished yet
  @property
  def playing(self):
    return self.played and self.start_time is not None and self.play_time is None

@dataclass(frozen=True)
class HistorySession:
  date: str
  index: int
  songs: tuple = field(default=())

def decode_field(chunk):
  if chunk.is_container:
    return None
  field_type = FIELD_TYPES.get(chunk.tag)
  if field_type is None:
    return decode_utf16be(chunk.payload)
  try:
    value = field_type.parse(chunk.payload)
  except ConstructError:
    logging.debug("history field %r too short (%d bytes)", chunk.tag, len(chunk.payload))
    return None
  convert = FIELD_CONVERTERS.get(chunk.tag)
  return convert(value) if convert is not None else value

def decode_fields(adat):
  fields = {}
  for chunk in adat.children:
    value = decode_field(chunk)
    if value is not None:
      fields[chunk.tag] = value
  return fields

def _walk(data):
  return walk_chunks(data, tag=HistoryTag, containers=HISTORY_CONTAINERS)

# every top level container wraps exactly one "adat" as its first child
def _attribute_blocks(data, container):
  for chunk in _walk(data):
    if chunk.tag != container or not chunk.children:
      continue
    adat = chunk.children[0]
    if adat.tag != "adat" or not adat.is_container:
      logging.debug("%s without leading adat, skipping", container)
      continue
    yield decode_fields(adat)

def list_sessions(data):
  sessions = []
  for fields in _attribute_blocks(data, "oses"):
    date = fields.get("session_date")
    index = fields.get("index")
    if not date or index is None:
      continue
    sessions.append(HistorySession(date=date, index=index))
  return sessions

def list_songs(data):
  songs = []
  for fields in _attribute_blocks(data, "oent"):
    songs.append(HistorySong(
      title=fields.get("title", ""),
      artist=fields.get("artist", ""),
      file_path=fields.get("file_path", ""),
      bpm=fields.get("bpm"),
      start_time=fields.get("start_time"),
      play_time=fields.get("play_time"),
      played=bool(fields.get("played")),
      deck=fields.get("deck", 0)))
  return songs

def session_filename(index):
  return "{}.session".format(index)

def load_history_file(filename):
  logging.debug("Loading history \"%s\"", filename)
  with open(filename, "rb") as f:
    sessions = list_sessions(f.read())
  logging.debug("Loaded %d sessions", len(sessions))
  return sessions

def load_session_file(filename):
  logging.debug("Loading session \"%s\"", filename)
  with open(filename, "rb") as f:
    return list_songs(f.read())

# sessions_dir is _Serato_/History/Sessions
def load_session(sessions_dir, session):
  filename = os.path.join(sessions_dir, session_filename(session.index))
  return replace(session, songs=tuple(load_session_file(filename)))
