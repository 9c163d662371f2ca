import logging
import os
from dataclasses import dataclass

from .chunk import filter_chunks, find_chunk, walk_chunks
from .utf16string import decode_utf16be

# _Serato_/Subcrates/*.crate
# vrsn: version string
# osrt: sorting (tvcn column name, brev reverse order)
# ovct: column (tvcn column name, tvcw column width)
# otrk: track (ptrk track path, relative to the drive root)

CRATE_CONTAINERS = ("otrk", "osrt", "ovct")

@dataclass(frozen=True)
class CrateColumn:
  name: str
  width: str = ""

@dataclass(frozen=True)
class CrateSorting:
  column: str
  reverse: bool = False

@dataclass(frozen=True)
class Crate:
  name: str
  path: str
  version: str = None
  track_paths: tuple = ()
  columns: tuple = ()
  sorting: CrateSorting = None

def crate_name(path):
  name = os.path.basename(path)
  if name.endswith(".crate"):
    name = name[:-len(".crate")]
  return name

def _text(chunks, tag):
  chunk = find_chunk(chunks, tag)
  if chunk is None or chunk.is_container:
    return None
  return decode_utf16be(chunk.payload)

def _flag(chunks, tag):
  chunk = find_chunk(chunks, tag)
  return chunk is not None and not chunk.is_container and chunk.payload[:1] not in (b"", b"\x00")

def parse_crate(data, path=""):
  version = None
  track_paths = []
  columns = []
  sorting = None
  for chunk in walk_chunks(data, containers=CRATE_CONTAINERS):
    if chunk.tag == "vrsn":
      version = decode_utf16be(chunk.payload)
    elif chunk.tag == "otrk":
      for ptrk in filter_chunks(chunk.children, "ptrk"):
        track_path = decode_utf16be(ptrk.payload)
        if track_path:
          track_paths.append(track_path)
    elif chunk.tag == "ovct":
      name = _text(chunk.children, "tvcn")
      if name:
        columns.append(CrateColumn(name, _text(chunk.children, "tvcw") or ""))
    elif chunk.tag == "osrt":
      column = _text(chunk.children, "tvcn")
      if column:
        sorting = CrateSorting(column, _flag(chunk.children, "brev"))
    else:
      logging.debug("ignoring crate tag %r (%d bytes)", chunk.tag, chunk.length)
  return Crate(
    name=crate_name(path),
    path=path,
    version=version,
    track_paths=tuple(track_paths),
    columns=tuple(columns),
    sorting=sorting)

def load_crate_file(filename):
  logging.debug("Loading crate \"%s\"", filename)
  with open(filename, "rb") as f:
    crate = parse_crate(f.read(), filename)
  logging.debug("Loaded crate \"%s\" with %d tracks", crate.name, len(crate.track_paths))
  return crate
