import base64
import unittest

from serato.color import ArgbColor, RgbColor
from serato.markers2 import FlipCensor, FlipJump, Markers2, decode_markers2_base64, parse_markers2, parse_markers2_base64, parse_markers2_geob
from serato_fixtures import cue_payload, flip_action, flip_payload, loop_payload, markers2_entry

SAMPLE = (b"\x01\x01" +
    markers2_entry("COLOR", b"\x00\xff\x99\xff") +
    markers2_entry("CUE", cue_payload(2, 1000, name="Drop")) +
    markers2_entry("CUE", cue_payload(0, 0)) +
    markers2_entry("LOOP", loop_payload(0, 1000, 5000, locked=True, name="Loop")) +
    markers2_entry("FLIP", flip_payload(0, "Flip", [
        flip_action(0, 1.0, 2.0),
        flip_action(1, 3.0, 4.0, -1.0),
        flip_action(5, 7.0)])) +
    markers2_entry("XYZ", b"\x01\x02") +
    markers2_entry("BPMLOCK", b"\x01") +
    b"\x00")

class Markers2TestCase(unittest.TestCase):
    def check_sample(self, markers):
        self.assertEqual(markers.track_color, RgbColor(0xff, 0x99, 0xff))
        self.assertTrue(markers.bpm_lock)

        self.assertEqual([c.index for c in markers.cue_points], [0, 2])
        self.assertEqual(markers.cue_points[0].position, 0)
        self.assertIsNone(markers.cue_points[0].name)
        self.assertEqual(markers.cue_points[1].position, 1000)
        self.assertEqual(markers.cue_points[1].name, "Drop")
        self.assertEqual(markers.cue_points[1].color, RgbColor(0xcc, 0, 0))

        self.assertEqual(len(markers.loops), 1)
        loop = markers.loops[0]
        self.assertEqual((loop.start_position, loop.end_position), (1000, 5000))
        self.assertEqual(loop.color, ArgbColor(0xff, 0x27, 0xaa, 0xe1))
        self.assertTrue(loop.locked)
        self.assertEqual(loop.name, "Loop")

        self.assertEqual(len(markers.flips), 1)
        flip = markers.flips[0]
        self.assertEqual(flip.name, "Flip")
        self.assertTrue(flip.enabled)
        self.assertFalse(flip.loop)
        self.assertEqual(flip.actions, (FlipJump(1.0, 2.0), FlipCensor(3.0, 4.0, -1.0)))

    def test_raw(self):
        self.check_sample(parse_markers2(SAMPLE))

    def test_base64(self):
        text = base64.b64encode(SAMPLE).decode("ascii").rstrip("=")
        wrapped = "\n".join(text[i:i+72] for i in range(0, len(text), 72))
        self.check_sample(parse_markers2_base64(wrapped))

    def test_geob(self):
        payload = b"\x01\x01" + base64.b64encode(SAMPLE) + b"\x00" * 32
        self.check_sample(parse_markers2_geob(payload))
        self.assertEqual(parse_markers2_geob(b"\x01"), Markers2())

    def test_without_header(self):
        markers = parse_markers2(markers2_entry("CUE", cue_payload(3, 42)))
        self.assertEqual([(c.index, c.position) for c in markers.cue_points], [(3, 42)])

    def test_loop_without_name(self):
        payload = loop_payload(1, 2000, 4000, color=(0xff, 0x10, 0x20, 0x30), locked=True, name=None)
        self.assertEqual(len(payload), 22)
        markers = parse_markers2(b"\x01\x01" + markers2_entry("LOOP", payload))
        loop = markers.loops[0]
        self.assertEqual((loop.index, loop.start_position, loop.end_position), (1, 2000, 4000))
        self.assertEqual(loop.color, ArgbColor(0xff, 0x10, 0x20, 0x30))
        self.assertTrue(loop.locked)
        self.assertIsNone(loop.name)

    def test_empty(self):
        self.assertEqual(parse_markers2(b""), Markers2())
        self.assertEqual(parse_markers2(b"\x01\x01"), Markers2())
        self.assertEqual(parse_markers2(b"\x01\x01\x00\x00\x00"), Markers2())

    def test_truncated_entry_keeps_previous(self):
        data = b"\x01\x01" + markers2_entry("CUE", cue_payload(1, 500)) + markers2_entry("CUE", cue_payload(2, 600))
        markers = parse_markers2(data[:-5])
        self.assertEqual([c.index for c in markers.cue_points], [1])

    def test_malformed_entry_stops(self):
        data = (b"\x01\x01" + markers2_entry("CUE", cue_payload(1, 500)) +
            markers2_entry("LOOP", b"\x00\x01\x00") +
            markers2_entry("CUE", cue_payload(2, 600)))
        with self.assertLogs(level="WARNING"):
            markers = parse_markers2(data)
        self.assertEqual([c.index for c in markers.cue_points], [1])
        self.assertEqual(markers.loops, ())

    def test_base64_length_quirk(self):
        self.assertEqual(decode_markers2_base64("QUJD"), b"ABC")
        self.assertEqual(decode_markers2_base64("QUJDA"), b"ABC")
        self.assertEqual(decode_markers2_base64("QUJDRA"), b"ABCD")
        self.assertEqual(decode_markers2_base64("QUJD\nRA\n"), b"ABCD")
