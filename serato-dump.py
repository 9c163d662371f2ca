#!/usr/bin/env python3

import argparse
import logging
import os
import sys

from serato import dump
from serato.autotags import parse_autotags, parse_autotags_base64
from serato.beatgrid import parse_beatgrid, parse_beatgrid_base64
from serato.crate import load_crate_file
from serato.database import DATABASE_FILENAME, SeratoDatabase
from serato.history import load_history_file, load_session_file
from serato.markers2 import parse_markers2, parse_markers2_base64

file_types = ["crate", "database", "history", "session", "markers2", "beatgrid", "autotags"]

def guess_type(filename):
  basename = os.path.basename(filename)
  if basename.endswith(".crate"):
    return "crate"
  if basename == DATABASE_FILENAME:
    return "database"
  if basename == "history.database":
    return "history"
  if basename.endswith(".session"):
    return "session"
  return None

def arg_type(value):
  if value not in file_types:
    raise argparse.ArgumentTypeError("{} is not a value from the list {}".format(value, ", ".join(file_types)))
  return value

parser = argparse.ArgumentParser(description='Dump Serato library files and tag payloads')
parser.add_argument('file', help='File to decode')
parser.add_argument('-t', '--type', dest='file_type', type=arg_type, default=None, help='File type, one of {} (default: guess from filename)'.format(", ".join(file_types)))
parser.add_argument('--base64', action='store_true', help='Tag payload is line wrapped base64 text (FLAC/Ogg)')
parser.add_argument('-q', '--quiet', action='store_const', dest='loglevel', const=logging.WARNING, help='Display warning messages only', default=logging.INFO)
parser.add_argument('-d', '--debug', action='store_const', dest='loglevel', const=logging.DEBUG, help='Display verbose debugging information')
args = parser.parse_args()

logging.basicConfig(level=args.loglevel, format='%(levelname)s: %(message)s')

file_type = args.file_type or guess_type(args.file)
if file_type is None:
  logging.error("Unable to guess the type of \"%s\", use --type", args.file)
  sys.exit(1)

tag_parsers = {
  "markers2": (parse_markers2, parse_markers2_base64, dump.dump_markers2),
  "beatgrid": (parse_beatgrid, parse_beatgrid_base64, dump.dump_beatgrid),
  "autotags": (parse_autotags, parse_autotags_base64, dump.dump_autotags),
}

try:
  if file_type == "crate":
    dump.dump_crate(load_crate_file(args.file))
  elif file_type == "database":
    db = SeratoDatabase()
    db.load_file(args.file)
    dump.dump_database(db)
  elif file_type == "history":
    dump.dump_sessions(load_history_file(args.file))
  elif file_type == "session":
    dump.dump_songs(load_session_file(args.file))
  else:
    parse_raw, parse_base64, dump_func = tag_parsers[file_type]
    with open(args.file, "rb") as f:
      data = f.read()
    dump_func(parse_base64(data.decode("ascii")) if args.base64 else parse_raw(data))
except OSError as e:
  logging.error("Failed to read \"%s\": %s", args.file, e)
  sys.exit(1)
