import io

import pytest

from nachokern.bitmap import BitMap


def test_new_bitmap_is_all_clear():
    bits = BitMap(40)
    assert bits.num_clear() == 40
    assert not any(bits.test(i) for i in range(40))


def test_mark_and_clear():
    bits = BitMap(64)
    bits.mark(5)
    bits.mark(63)
    assert bits.test(5) is True
    assert bits.test(63) is True
    assert bits.test(6) is False
    assert bits.num_clear() == 62
    bits.clear(5)
    assert bits.test(5) is False
    assert bits.num_clear() == 63


def test_mark_is_idempotent():
    bits = BitMap(10)
    bits.mark(3)
    bits.mark(3)
    assert bits.num_clear() == 9


def test_find_allocates_lowest_clear_bit():
    bits = BitMap(4)
    bits.mark(1)
    assert bits.find() == 0
    assert bits.find() == 2
    assert bits.find() == 3
    assert bits.find() is None
    assert bits.num_clear() == 0


def test_find_reuses_cleared_bit():
    bits = BitMap(3)
    for _ in range(3):
        bits.find()
    bits.clear(1)
    assert bits.find() == 1


@pytest.mark.parametrize("which", [-1, 8, 100])
def test_out_of_range_raises(which):
    bits = BitMap(8)
    with pytest.raises(IndexError):
        bits.mark(which)
    with pytest.raises(IndexError):
        bits.clear(which)
    with pytest.raises(IndexError):
        bits.test(which)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        BitMap(-1)


def test_format_lists_set_bits():
    bits = BitMap(8)
    bits.mark(1)
    bits.mark(3)
    assert bits.format() == "Bitmap set:\n1, 3, \n"


def test_write_back_uses_whole_words():
    bits = BitMap(33)
    out = io.BytesIO()
    bits.write_back(out)
    assert len(out.getvalue()) == 8


def test_write_back_is_little_endian_words():
    bits = BitMap(32)
    bits.mark(0)
    out = io.BytesIO()
    bits.write_back(out)
    assert out.getvalue() == b"\x01\x00\x00\x00"


def test_round_trip_through_file():
    original = BitMap(70)
    for which in (0, 7, 31, 32, 69):
        original.mark(which)
    storage = io.BytesIO()
    original.write_back(storage)

    restored = BitMap(70)
    restored.fetch_from(storage)
    assert [restored.test(i) for i in range(70)] == [original.test(i) for i in range(70)]
    assert restored.num_clear() == original.num_clear()


def test_fetch_from_short_file_keeps_remaining_bits():
    bits = BitMap(64)
    bits.mark(40)
    bits.fetch_from(io.BytesIO(b"\xff"))
    assert all(bits.test(i) for i in range(8))
    assert bits.test(8) is False
    assert bits.test(40) is True