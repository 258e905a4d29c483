"""Unit tests for the layers under the value codec.

Byte sink/source, varints, fixed-width integers, text and the key
dictionary.  Whole-value behaviour is in test_api.py.
"""

from __future__ import annotations

import os
import struct
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from oab import (
    ByteSink,
    ByteSource,
    InvalidSequence,
    KeyDictionary,
    KeyDictionaryError,
    MalformedKeyReference,
    MalformedVarint,
    OutOfBounds,
    Reader,
    UnsupportedType,
    Writer,
    decode_svarint,
    decode_uvarint,
    encode_svarint,
    encode_uvarint,
    zigzag_decode,
    zigzag_encode,
)
from oab._text import decode_text, encode_text


# ── Byte sink ─────────────────────────────────────────────────

class TestByteSink(unittest.TestCase):
    def test_default_capacity(self):
        self.assertEqual(ByteSink().capacity, 1024)
        self.assertEqual(Writer().capacity, 1024)

    def test_finalize_returns_logical_prefix_only(self):
        sink = ByteSink(16)
        sink.append(b"abc")
        self.assertEqual(sink.finalize(), b"abc")
        self.assertEqual(len(sink), 3)
        self.assertEqual(sink.capacity, 16)

    def test_capacity_doubles(self):
        sink = ByteSink(4)
        sink.append(b"12345")
        self.assertEqual(sink.capacity, 8)
        sink.append(b"678")
        self.assertEqual(sink.capacity, 8)
        sink.append_byte(0x39)
        self.assertEqual(sink.capacity, 16)
        self.assertEqual(sink.finalize(), b"123456789")

    def test_large_append_jumps_past_double(self):
        sink = ByteSink(2)
        sink.append(bytes(100))
        self.assertGreaterEqual(sink.capacity, 100)
        self.assertEqual(len(sink), 100)

    def test_zero_initial_capacity_grows(self):
        sink = ByteSink(0)
        sink.append_byte(7)
        self.assertEqual(sink.finalize(), b"\x07")

    def test_negative_initial_capacity_rejected(self):
        with self.assertRaises(ValueError):
            ByteSink(-1)

    def test_reset_keeps_capacity(self):
        sink = ByteSink(4)
        sink.append(bytes(40))
        cap = sink.capacity
        sink.reset()
        self.assertEqual(len(sink), 0)
        self.assertEqual(sink.capacity, cap)
        self.assertEqual(sink.finalize(), b"")
        sink.append(b"xy")
        self.assertEqual(sink.finalize(), b"xy")

    def test_finalize_is_a_snapshot(self):
        sink = ByteSink()
        sink.append(b"ab")
        snap = sink.finalize()
        sink.append(b"cd")
        self.assertEqual(snap, b"ab")
        self.assertIsInstance(snap, bytes)


# ── Byte source ───────────────────────────────────────────────

class TestByteSource(unittest.TestCase):
    def test_take_and_cursor(self):
        src = ByteSource(b"abcdef")
        self.assertEqual(src.take(2), b"ab")
        self.assertEqual(src.offset, 2)
        self.assertEqual(src.remaining, 4)
        src.skip(3)
        self.assertEqual(src.rest(), b"f")
        self.assertFalse(src.at_end)
        src.skip(1)
        self.assertTrue(src.at_end)

    def test_read_past_end(self):
        src = ByteSource(b"ab")
        with self.assertRaises(OutOfBounds):
            src.take(3)
        # A failed read does not move the cursor.
        self.assertEqual(src.offset, 0)

    def test_out_of_bounds_is_an_index_error(self):
        with self.assertRaises(IndexError):
            ByteSource(b"").skip(1)

    def test_negative_length_rejected(self):
        with self.assertRaises(OutOfBounds):
            ByteSource(b"abc").take(-1)

    def test_reset_and_rebind(self):
        src = ByteSource(b"ab")
        src.skip(2)
        src.reset()
        self.assertEqual(src.offset, 0)
        src.reset(b"xyz")
        self.assertEqual(src.take(3), b"xyz")

    def test_accepts_bytearray_and_memoryview(self):
        self.assertEqual(ByteSource(bytearray(b"\x01")).take(1), b"\x01")
        self.assertEqual(ByteSource(memoryview(b"\x02")).take(1), b"\x02")

    def test_source_is_independent_of_caller_buffer(self):
        buf = bytearray(b"\x01\x02")
        src = ByteSource(buf)
        buf[0] = 0xFF
        self.assertEqual(src.take(1), b"\x01")


# ── Fixed-width integers and floats ───────────────────────────

class TestFixedWidth(unittest.TestCase):
    def test_little_endian_layout(self):
        data = Writer().u8(0xAB).u16(0x1234).u32(0xDEADBEEF).finalize()
        self.assertEqual(data, b"\xab\x34\x12\xef\xbe\xad\xde")

    def test_signed_round_trip(self):
        data = Writer().i8(-1).i16(-2).i32(-(2**31)).finalize()
        r = Reader(data)
        self.assertEqual((r.i8(), r.i16(), r.i32()), (-1, -2, -(2**31)))
        self.assertTrue(r.at_end)

    def test_unsigned_read_of_signed_write(self):
        r = Reader(Writer().i8(-1).i16(-1).i32(-1).finalize())
        self.assertEqual((r.u8(), r.u16(), r.u32()), (0xFF, 0xFFFF, 0xFFFFFFFF))

    def test_writes_wrap_to_width(self):
        r = Reader(Writer().u8(0x1FF).u16(0x12345).u32(2**32 + 5).finalize())
        self.assertEqual((r.u8(), r.u16(), r.u32()), (0xFF, 0x2345, 5))

    def test_f64_little_endian(self):
        data = Writer().f64(5.4).finalize()
        self.assertEqual(data, struct.pack("<d", 5.4))
        self.assertEqual(Reader(data).f64(), 5.4)

    def test_f64_primitive_keeps_nan(self):
        got = Reader(Writer().f64(float("nan")).finalize()).f64()
        self.assertNotEqual(got, got)

    def test_f64_rejects_non_numbers(self):
        with self.assertRaises(UnsupportedType):
            Writer().f64("5.4")

    def test_integer_writes_reject_floats(self):
        for op in ("u8", "u16", "u32", "uvarint", "svarint"):
            with self.subTest(op=op):
                with self.assertRaises(UnsupportedType):
                    getattr(Writer(), op)(5.4)

    def test_truncated_fixed_reads(self):
        for op, size in (("u16", 2), ("i32", 4), ("f64", 8)):
            with self.subTest(op=op):
                with self.assertRaises(OutOfBounds):
                    getattr(Reader(bytes(size - 1)), op)()


# ── Varints ───────────────────────────────────────────────────

class TestUnsignedVarint(unittest.TestCase):
    def test_boundaries(self):
        cases = {
            0: b"\x00",
            127: b"\x7f",
            128: b"\x80\x01",
            16383: b"\xff\x7f",
            16384: b"\x80\x80\x01",
            2**31 - 1: b"\xff\xff\xff\xff\x07",
            2**32 - 1: b"\xff\xff\xff\xff\x0f",
        }
        for n, wire in cases.items():
            with self.subTest(n=n):
                self.assertEqual(encode_uvarint(n), wire)
                self.assertEqual(decode_uvarint(wire, 0), (n, len(wire)))

    def test_cast_to_unsigned_32(self):
        self.assertEqual(encode_uvarint(-1), encode_uvarint(2**32 - 1))
        self.assertEqual(encode_uvarint(2**32), b"\x00")
        self.assertEqual(encode_uvarint(2**32 + 300), encode_uvarint(300))

    def test_decode_at_offset(self):
        self.assertEqual(decode_uvarint(b"\xff\xac\x02\x00", 1), (300, 3))

    def test_truncated(self):
        with self.assertRaises(OutOfBounds):
            decode_uvarint(b"\x80\x80", 0)
        with self.assertRaises(OutOfBounds):
            decode_uvarint(b"", 0)

    def test_continuation_past_five_bytes(self):
        with self.assertRaises(MalformedVarint):
            decode_uvarint(b"\x80\x80\x80\x80\x80\x00", 0)

    def test_fifth_byte_over_32_bits(self):
        with self.assertRaises(MalformedVarint):
            decode_uvarint(b"\xff\xff\xff\xff\x10", 0)

    def test_non_minimal_encoding_still_decodes(self):
        self.assertEqual(decode_uvarint(b"\x81\x00", 0), (1, 2))

    def test_reader_and_writer(self):
        r = Reader(Writer().uvarint(300).uvarint(1).finalize())
        self.assertEqual(r.uvarint(), 300)
        self.assertEqual(r.uvarint(), 1)
        self.assertTrue(r.at_end)


class TestZigzag(unittest.TestCase):
    def test_mapping(self):
        for n, z in ((0, 0), (-1, 1), (1, 2), (-2, 3), (2, 4)):
            with self.subTest(n=n):
                self.assertEqual(zigzag_encode(n), z)
                self.assertEqual(zigzag_decode(z), n)

    def test_round_trip_extremes(self):
        for n in (0, 1, -1, 2**31 - 1, -(2**31)):
            with self.subTest(n=n):
                wire = encode_svarint(n)
                self.assertEqual(decode_svarint(wire, 0), (n, len(wire)))

    def test_extremes_use_full_32_bits(self):
        self.assertEqual(zigzag_encode(2**31 - 1), 2**32 - 2)
        self.assertEqual(zigzag_encode(-(2**31)), 2**32 - 1)

    def test_wraps_to_signed_32(self):
        self.assertEqual(encode_svarint(2**31), encode_svarint(-(2**31)))

    def test_reader_and_writer(self):
        r = Reader(Writer().svarint(-123).svarint(456).finalize())
        self.assertEqual((r.svarint(), r.svarint()), (-123, 456))


# ── Text ──────────────────────────────────────────────────────

class TestText(unittest.TestCase):
    def test_byte_length_prefix(self):
        self.assertEqual(Writer().text("é€").finalize(), b"\x05\xc3\xa9\xe2\x82\xac")

    def test_sequence_widths(self):
        for s, width in (("A", 1), ("é", 2), ("€", 3), ("😀", 4)):
            with self.subTest(s=s):
                self.assertEqual(len(encode_text(s)), width)

    def test_round_trips(self):
        for s in ("", "plain ascii", "naïve", "日本語", "😀 and 🎉", "nul\x00inside"):
            with self.subTest(s=s):
                r = Reader(Writer().text(s).finalize())
                self.assertEqual(r.text(), s)
                self.assertTrue(r.at_end)

    def test_surrogate_pair_becomes_one_sequence(self):
        paired = "\ud83d\ude00"
        self.assertEqual(encode_text(paired), b"\xf0\x9f\x98\x80")
        self.assertEqual(decode_text(encode_text(paired)), "😀")

    def test_lone_surrogate_rejected(self):
        with self.assertRaises(InvalidSequence):
            encode_text("a\ud800b")

    def test_invalid_utf8_rejected(self):
        for raw in (b"\xff", b"\x80", b"\xc3\x28", b"\xe2\x82", b"\xf8\x88\x80\x80\x80"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidSequence):
                    decode_text(raw)

    def test_invalid_sequence_is_a_value_error(self):
        with self.assertRaises(ValueError):
            decode_text(b"\xff")

    def test_single_byte_mode_round_trip(self):
        s = "caf\xe9 \xff\x00"
        wire = Writer(ascii_only=True).text(s).finalize()
        self.assertEqual(wire, b"\x07caf\xe9 \xff\x00")
        self.assertEqual(Reader(wire, ascii_only=True).text(), s)

    def test_single_byte_mode_is_lossy_above_ff(self):
        with self.assertLogs("oab._text", level="WARNING"):
            raw = encode_text("Łx", ascii_only=True)
        self.assertEqual(raw, b"\x41x")
        self.assertNotEqual(decode_text(raw, ascii_only=True), "Łx")

    def test_mode_mismatch_goes_undetected(self):
        wire = Writer().text("é").finalize()
        self.assertEqual(Reader(wire, ascii_only=True).text(), "\xc3\xa9")

    def test_non_string_rejected(self):
        with self.assertRaises(UnsupportedType):
            Writer().text(b"bytes")

    def test_truncated_payload(self):
        with self.assertRaises(OutOfBounds):
            Reader(b"\x05abc").text()


# ── Byte runs ─────────────────────────────────────────────────

class TestByteRuns(unittest.TestCase):
    def test_blob_round_trip(self):
        payload = bytes(range(256))
        r = Reader(Writer().blob(payload).blob(b"").finalize())
        self.assertEqual(r.blob(), payload)
        self.assertEqual(r.blob(), b"")

    def test_raw_has_no_prefix(self):
        data = Writer().raw(b"\x00\x01").u8(234).finalize()
        self.assertEqual(data, b"\x00\x01\xea")
        r = Reader(data)
        self.assertEqual(r.raw(2), b"\x00\x01")
        self.assertEqual(r.u8(), 234)


# ── Key dictionary ────────────────────────────────────────────

class TestKeyDictionary(unittest.TestCase):
    def test_indices_follow_order(self):
        d = KeyDictionary(["id", "username", "score"])
        self.assertEqual(d.index_of("username"), 1)
        self.assertIsNone(d.index_of("missing"))
        self.assertEqual(d.key_at(2), "score")
        self.assertEqual(len(d), 3)
        self.assertEqual(list(d), ["id", "username", "score"])
        self.assertIn("id", d)
        self.assertNotIn(42, d)

    def test_out_of_range_lookup(self):
        d = KeyDictionary(["a"])
        for idx in (1, 99, -1):
            with self.subTest(idx=idx):
                with self.assertRaises(MalformedKeyReference):
                    d.key_at(idx)

    def test_duplicates_rejected(self):
        with self.assertRaises(KeyDictionaryError):
            KeyDictionary(["a", "b", "a"])

    def test_non_strings_rejected(self):
        with self.assertRaises(KeyDictionaryError):
            KeyDictionary(["a", 1])

    def test_bare_string_rejected(self):
        with self.assertRaises(KeyDictionaryError):
            KeyDictionary("username")

    def test_equality_by_content(self):
        self.assertEqual(KeyDictionary(["a", "b"]), KeyDictionary(("a", "b")))
        self.assertNotEqual(KeyDictionary(["a", "b"]), KeyDictionary(["b", "a"]))
        self.assertEqual(hash(KeyDictionary(["a"])), hash(KeyDictionary(["a"])))

    def test_coerce(self):
        d = KeyDictionary(["a"])
        self.assertIs(KeyDictionary.coerce(d), d)
        self.assertEqual(KeyDictionary.coerce(None), KeyDictionary())
        self.assertEqual(KeyDictionary.coerce(["a"]), d)

    def test_immutable(self):
        d = KeyDictionary(["a"])
        with self.assertRaises(AttributeError):
            d.extra = 1
        with self.assertRaises(TypeError):
            d._index["b"] = 1

    def test_source_list_changes_do_not_leak(self):
        keys = ["a"]
        d = KeyDictionary(keys)
        keys.append("b")
        self.assertEqual(len(d), 1)


if __name__ == "__main__":
    unittest.main()
