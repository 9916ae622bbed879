import pytest

from lingot.params import (
    ParameterId,
    ParameterSpec,
    ParameterType,
    find_parameter,
    get_parameter_spec,
    parameter_specs,
)


def test_specs_cover_every_identifier_in_order():
    specs = parameter_specs()
    assert [spec.id for spec in specs] == list(ParameterId)


def test_get_spec_matches_identifier():
    for pid in ParameterId:
        assert get_parameter_spec(pid).id is pid
        assert get_parameter_spec(int(pid)) == get_parameter_spec(pid)


def test_get_spec_rejects_unknown_identifier():
    with pytest.raises(ValueError):
        get_parameter_spec(len(ParameterId))


def test_find_parameter_round_trips_names():
    for spec in parameter_specs():
        assert find_parameter(spec.name) is spec


def test_find_parameter_unknown_keyword():
    with pytest.raises(KeyError):
        find_parameter("NOT_AN_OPTION")


def test_names_are_unique():
    names = [spec.name for spec in parameter_specs()]
    assert len(names) == len(set(names))


def test_current_options_in_file_order():
    current = [spec.name for spec in parameter_specs() if not spec.deprecated]
    assert current == [
        "AUDIO_SYSTEM",
        "ROOT_FREQUENCY_ERROR",
        "FFT_SIZE",
        "TEMPORAL_WINDOW",
        "MIN_SNR",
        "CALCULATION_RATE",
        "VISUALIZATION_RATE",
        "MINIMUM_FREQUENCY",
        "MAXIMUM_FREQUENCY",
    ]


def test_min_snr_spec():
    spec = get_parameter_spec(ParameterId.MIN_SNR)
    assert spec.type is ParameterType.FLOAT
    assert spec.units == "dB"
    assert (spec.float_min, spec.float_max) == (0.0, 40.0)


def test_fft_size_spec():
    spec = find_parameter("FFT_SIZE")
    assert spec.type is ParameterType.INTEGER
    assert (spec.int_min, spec.int_max) == (256, 4096)
    assert spec.units == "samples"


def test_audio_dev_is_deprecated_string():
    spec = get_parameter_spec(ParameterId.AUDIO_DEV)
    assert spec.type is ParameterType.STRING
    assert spec.deprecated is True
    assert spec.str_max_len == 512


def test_audio_system_spec_has_no_units():
    spec = get_parameter_spec(ParameterId.AUDIO_SYSTEM)
    assert spec.type is ParameterType.AUDIO_SYSTEM
    assert spec.units is None
    assert spec.deprecated is False


def test_ranges_are_ordered():
    for spec in parameter_specs():
        if spec.type is ParameterType.FLOAT:
            assert spec.float_min <= spec.float_max
        elif spec.type is ParameterType.INTEGER:
            assert spec.int_min <= spec.int_max


def test_specs_are_immutable():
    spec = find_parameter("GAIN")
    with pytest.raises(AttributeError):
        spec.name = "OTHER"
    assert isinstance(spec, ParameterSpec) and spec.name == "GAIN"