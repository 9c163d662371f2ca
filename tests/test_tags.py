import base64
import unittest

from serato.tags import parse_track_tags
from serato_fixtures import beatgrid, cue_payload, markers2_entry

MARKERS = b"\x01\x01" + markers2_entry("CUE", cue_payload(0, 1500)) + b"\x00"
BEATGRID = beatgrid([(0.0, 126.0)])
AUTOTAGS = b"\x01\x01" + b"126.00\x00" + b"-1.000\x00" + b"0.000\x00"

def b64(data):
    return base64.b64encode(data).decode("ascii").rstrip("=")

class TrackTagsTestCase(unittest.TestCase):
    def test_id3(self):
        tags = parse_track_tags({
            "Serato Markers2": b"\x01\x01" + base64.b64encode(MARKERS) + b"\x00" * 16,
            "Serato BeatGrid": BEATGRID,
            "Serato Autotags": AUTOTAGS,
            "Serato Overview": b"\x01\x05\x00",
            "TIT2": "Title",
        }, "id3")
        self.assertEqual(tags.markers.cue_points[0].position, 1500)
        self.assertEqual(tags.beatgrid.markers[0].bpm, 126.0)
        self.assertEqual(tags.autotags.bpm, 126.0)
        self.assertEqual(tags.overview, b"\x01\x05\x00")

    def test_vorbis(self):
        tags = parse_track_tags({
            "serato_markers_v2": b64(MARKERS),
            "SERATO_BEATGRID": b64(BEATGRID),
            "Serato_Autotags": b64(AUTOTAGS),
        }, "vorbis")
        self.assertEqual(tags.markers.cue_points[0].position, 1500)
        self.assertEqual(tags.beatgrid.markers[0].bpm, 126.0)
        self.assertEqual(tags.autotags.auto_gain, -1.0)
        self.assertIsNone(tags.overview)

    def test_mp4(self):
        tags = parse_track_tags({
            "----:com.serato.dj:markersv2": MARKERS,
            "beatgrid": BEATGRID,
            "\xa9nam": "Title",
        }, "mp4")
        self.assertEqual(tags.markers.cue_points[0].position, 1500)
        self.assertEqual(tags.beatgrid.markers[0].bpm, 126.0)
        self.assertIsNone(tags.autotags)

    def test_nothing_found(self):
        self.assertIsNone(parse_track_tags({"TIT2": "Title"}, "id3"))
        self.assertIsNone(parse_track_tags({}, "vorbis"))

    def test_broken_tag_skipped(self):
        with self.assertLogs(level="WARNING"):
            tags = parse_track_tags({
                "SERATO_BEATGRID": "üüüü",
                "SERATO_AUTOTAGS": b64(AUTOTAGS),
            }, "vorbis")
        self.assertIsNone(tags.beatgrid)
        self.assertEqual(tags.autotags.bpm, 126.0)

    def test_unknown_container(self):
        with self.assertRaises(ValueError):
            parse_track_tags({}, "ape")
