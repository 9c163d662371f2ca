import logging

from .beatgrid import effective_bpm, is_dynamic

# dump functions for inspecting decoded files

def dump_crate(crate):
  logging.info("crate \"%s\" version %s, %d tracks", crate.name, crate.version, len(crate.track_paths))
  if crate.sorting is not None:
    logging.info("  sorted by %s%s", crate.sorting.column, " (reverse)" if crate.sorting.reverse else "")
  for column in crate.columns:
    logging.debug("  column %s width %s", column.name, column.width)
  for path in crate.track_paths:
    logging.info("  %s", path)

def dump_database(db):
  logging.info("database version %s, %d tracks", db["version"], len(db["tracks"]))
  for track in db["tracks"]:
    logging.info("  %s - %s (%s) %s BPM key %s", track.artist, track.title, track.file_path, track.bpm, track.key)

def dump_sessions(sessions):
  for session in sessions:
    logging.info("session %d: %s", session.index, session.date)

def dump_songs(songs):
  for song in songs:
    logging.info("deck %d: %s - %s (%s)%s", song.deck, song.artist, song.title, song.file_path,
      " playing" if song.playing else "")
    logging.debug("  bpm %s start %s end %s played %s", song.bpm, song.start_time, song.play_time, song.played)

def dump_markers2(markers):
  logging.info("track color %s, bpm lock %s", markers.track_color, markers.bpm_lock)
  for cue in markers.cue_points:
    logging.info("  cue %d at %d ms color %s %s", cue.index, cue.position, cue.color, cue.name or "")
  for loop in markers.loops:
    logging.info("  loop %d %d-%d ms color %s%s %s", loop.index, loop.start_position, loop.end_position,
      loop.color, " locked" if loop.locked else "", loop.name or "")
  for flip in markers.flips:
    logging.info("  flip %d \"%s\" enabled %s loop %s, %d actions", flip.index, flip.name, flip.enabled,
      flip.loop, len(flip.actions))
    for action in flip.actions:
      logging.debug("    %s", action)

def dump_beatgrid(beatgrid):
  logging.info("beatgrid with %d markers, %s BPM%s", len(beatgrid.markers), effective_bpm(beatgrid),
    " (dynamic)" if is_dynamic(beatgrid) else "")
  for marker in beatgrid.markers:
    logging.debug("  %s", marker)

def dump_autotags(autotags):
  logging.info("autotags bpm %.2f auto gain %.3f gain %.3f dB", autotags.bpm, autotags.auto_gain, autotags.gain_db)
