import pytest

from lingot.scale import (
    MID_C_FREQUENCY,
    Scale,
    ScaleError,
    Shift,
    format_shift,
    load_scl,
    parse_shift,
)

GOOD_SCL = """! test.scl
!
Test scale
 4
!
 200.0
 5/4
 3/2
 2/1
"""


def _write(tmp_path, text):
    path = tmp_path / "scale.scl"
    path.write_text(text)
    return path


def test_parse_shift_cents():
    shift = parse_shift("100.5")
    assert shift == Shift(100.5, -1, -1)
    assert not shift.is_ratio


def test_parse_shift_octave_ratio():
    shift = parse_shift("2/1")
    assert shift.cents == pytest.approx(1200.0)
    assert (shift.numerator, shift.denominator) == (2, 1)
    assert shift.is_ratio


def test_parse_shift_ratio_ordering():
    fifth = parse_shift("3/2")
    tone = parse_shift("9/8")
    assert 0.0 < tone.cents < fifth.cents < 1200.0


def test_parse_shift_leading_number():
    assert parse_shift("12.5cents").cents == 12.5


@pytest.mark.parametrize("text", ["", "/", "abc", "x/2", "3/0", "-3/2"])
def test_parse_shift_invalid(text):
    with pytest.raises(ScaleError):
        parse_shift(text)


def test_format_shift_cents():
    assert format_shift(701.955, -1, -1) == "701.9550"


def test_format_shift_ratio():
    assert format_shift(0.0, 3, 2) == "3/2"
    assert str(Shift(0.0, 5, 4)) == "5/4"


@pytest.mark.parametrize("text", ["3/2", "5/4", "1/1", "81/80"])
def test_ratio_round_trip(text):
    shift = parse_shift(text)
    assert format_shift(shift.cents, shift.numerator, shift.denominator) == text
    assert parse_shift(str(shift)) == shift


@pytest.mark.parametrize("cents", [0.0, 100.0, 386.3137, 1199.9999])
def test_cents_round_trip(cents):
    shift = parse_shift(format_shift(cents))
    assert shift.cents == pytest.approx(cents, abs=1e-4)
    assert shift.numerator == -1


def test_scale_length_mismatch():
    with pytest.raises(ValueError):
        Scale("x", MID_C_FREQUENCY, ["1", "2"], [Shift(0.0, 1, 1)])


def test_load_scl(tmp_path):
    scale = load_scl(_write(tmp_path, GOOD_SCL))
    assert scale.name == "Test scale"
    assert scale.base_frequency == 261.625565
    assert scale.notes == 4
    assert scale.note_names == ["1", "2", "3", "4"]
    assert scale.shifts[0] == Shift(0.0, 1, 1)
    assert scale.shifts[1] == Shift(200.0, -1, -1)
    assert (scale.shifts[2].numerator, scale.shifts[2].denominator) == (5, 4)
    cents = scale.offset_cents
    assert cents == sorted(cents)
    assert len(set(cents)) == len(cents)


def test_load_scl_crlf_name(tmp_path):
    path = tmp_path / "crlf.scl"
    path.write_bytes(GOOD_SCL.replace("\n", "\r\n").encode())
    assert load_scl(path).name == "Test scale"


def test_load_scl_missing_file(tmp_path):
    with pytest.raises(ScaleError, match="Error opening scale file"):
        load_scl(tmp_path / "absent.scl")


def test_load_scl_requires_comment_first(tmp_path):
    with pytest.raises(ScaleError, match="incorrect format"):
        load_scl(_write(tmp_path, GOOD_SCL.replace("! test.scl", "test.scl")))


def test_load_scl_unordered(tmp_path):
    text = GOOD_SCL.replace(" 5/4", " 100.0")
    with pytest.raises(ScaleError, match="line 7: the notes must be well ordered"):
        load_scl(_write(tmp_path, text))


def test_load_scl_truncated(tmp_path):
    text = "\n".join(GOOD_SCL.splitlines()[:6]) + "\n"
    with pytest.raises(ScaleError, match="note number mismatch"):
        load_scl(_write(tmp_path, text))


def test_load_scl_blank_pitch_line(tmp_path):
    text = GOOD_SCL.replace(" 5/4", "   ")
    with pytest.raises(ScaleError, match="note number mismatch"):
        load_scl(_write(tmp_path, text))


def test_load_scl_bad_pitch(tmp_path):
    text = GOOD_SCL.replace(" 5/4", " five")
    with pytest.raises(ScaleError, match="incorrect format"):
        load_scl(_write(tmp_path, text))