import logging
from dataclasses import dataclass

from construct import Bytes, ExprAdapter, Int32ub, Struct

# crate, database and history files share the same framing:
# 4 byte tag, 4 byte big endian length, payload. some tags are containers
# holding a nested sequence of chunks.
# see https://github.com/mixxxdj/mixxx/wiki/Serato-Database-Format

MAX_DEPTH = 16 # input files are untrusted, do not follow deeper nesting
HEADER_SIZE = 8

AsciiTag = ExprAdapter(Bytes(4),
  lambda obj, ctx: obj.decode("latin-1"),
  lambda obj, ctx: obj.encode("latin-1"))

def ChunkHeader(tag):
  return Struct(
    "tag" / tag,
    "length" / Int32ub
  )

@dataclass(frozen=True)
class Chunk:
  tag: object
  length: int
  payload: object # bytes for leaf tags, tuple of Chunk for container tags

  @property
  def is_container(self):
    return isinstance(self.payload, tuple)

  @property
  def children(self):
    return self.payload if self.is_container else ()

def walk_chunks(data, start=0, end=None, tag=AsciiTag, containers=(), depth=0):
  if end is None or end > len(data):
    end = len(data)
  header = ChunkHeader(tag)
  offset = start
  while offset + HEADER_SIZE <= end:
    fields = header.parse(bytes(data[offset:offset+HEADER_SIZE]))
    payload_start = offset + HEADER_SIZE
    payload_end = payload_start + fields.length
    if payload_end > end:
      # real world files have trailing garbage, drop it silently
      logging.debug("chunk %r at offset %d ends at %d beyond %d, ignoring rest", fields.tag, offset, payload_end, end)
      return
    if fields.tag in containers and depth < MAX_DEPTH:
      payload = tuple(walk_chunks(data, payload_start, payload_end, tag, containers, depth+1))
    else:
      if fields.tag in containers:
        logging.warning("chunk %r nested deeper than %d levels, not descending", fields.tag, MAX_DEPTH)
      payload = bytes(data[payload_start:payload_end])
    yield Chunk(fields.tag, fields.length, payload)
    offset = payload_end

def filter_chunks(chunks, tag):
  return [chunk for chunk in chunks if chunk.tag == tag]

def find_chunk(chunks, tag):
  return next((chunk for chunk in chunks if chunk.tag == tag), None)
