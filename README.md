# lingot

These are the building blocks of a musical instrument tuner. They are written
in pure Python and need no third-party packages.

## Modules

### `lingot.messages`

`MessageQueue` is a small thread-safe FIFO of `Message` objects. Each
message has a `text`, a `message_type` (`MessageType.ERROR`, `WARNING` or
`INFO`) and an `error_code`.

- The default capacity is 4.
- `add` returns `False` and drops the message when the queue is full or when
  a message with the same text is already waiting.
- Errors and warnings are also printed to standard error when they are queued.
- `get` removes and returns the oldest message. It returns `None` when the
  queue is empty.
- The helpers `add_error`, `add_error_with_code`, `add_warning` and `add_info`
  set the type for you.

### `lingot.scale`

- `parse_shift` reads a note offset written either in cents (`"100.0"`) or as
  a ratio (`"3/2"`). It returns a `Shift` with `cents`, `numerator` and
  `denominator`. A shift given in cents has numerator and denominator `-1`.
  Malformed text raises `ScaleError`.
- `format_shift` writes a shift back. Cents use four decimals, ratios are
  written as `n/d`.
- `Scale` holds a name, a base frequency (C4, 261.625565 Hz, by default),
  the note names and one `Shift` per note. `Scale.notes` is the number of
  notes.
- `load_scl` reads a Scala `.scl` file. The notes are named `"1"`, `"2"` and
  so on, and they must be in increasing order. Any problem, including a file
  that cannot be opened, raises `ScaleError` with the line number.

### `lingot.params`

This module is the table of configuration options. `ParameterId`
enumerates them. `ParameterSpec` gives the name, `ParameterType`, units,
allowed range and whether the option is deprecated. The lookup functions are:

- `parameter_specs()` returns the whole table, ordered by identifier.
- `get_parameter_spec(id)` raises `ValueError` for an identifier that does
  not exist.
- `find_parameter(name)` raises `KeyError` for an unknown keyword.

### `lingot.configfile`

This module reads and writes the `KEY = value` configuration format,
including the `SCALE = { ... }` block.

- `Config` holds the settings. Audio devices are kept per audio system name
  in `audio_devices`, and `audio_device` gives the device of the selected
  system.
- `parse_config(config, lines, audio_systems, messages)` applies lines to a
  `Config` and returns a `LoadReport` with `errors`, `warnings` and `ok`.
  - Out-of-range or malformed values keep their previous value and are
    reported.
  - Deprecated options are accepted with a warning.
  - The scale replaces `config.scale` only if it was read without errors.
  - If a `MessageQueue` is given, a warning is queued there when the input
    contained errors.
- `load_config` does the same from a file and raises `OSError` if the file
  cannot be opened.
- `format_config` renders a configuration as text. `save_config` writes that
  text to a file.

```python
from lingot.configfile import Config, parse_config, format_config

config = Config()
report = parse_config(config, ["FFT_SIZE = 1024", "MIN_SNR = 15.0"])
print(report.ok, config.fft_size, config.min_overall_snr)  # True 1024 15.0
print(format_config(config, ["ALSA"], "1.0.0"))
```

### `lingot.signal`

- `window(n, WindowType.HANNING)` and `window(n, WindowType.HAMMING)` build
  analysis windows.
- `compute_noise_level(spd, n, cbuffer_size)` follows the noise floor of a
  power spectrum with a one-pole low-pass filter.
- `estimate_fundamental_frequency(...)` looks for the strongest spectral
  peaks and refines each one from its complex FFT bins. It then chooses the
  best set of harmonically related peaks. It returns `(frequency, divisor)`,
  and the fundamental is `frequency / divisor`. A frequency of `0.0` means
  nothing was found.

## Example

```python
from lingot.scale import parse_shift, format_shift

shift = parse_shift("3/2")
print(round(shift.cents, 3))  # 701.955
print(format_shift(shift.cents, shift.numerator, shift.denominator))  # 3/2
```

```python
from lingot.messages import MessageQueue

queue = MessageQueue(5)
queue.add_warning("The configuration file contains errors")
message = queue.get()
print(message.message_type.name, message.text)
```

## What this package does not do

It does not capture audio, compute FFTs or run a tuner. It has no graphical
interface and no command-line program. Callers supply the spectra, the list
of audio system names and the file paths themselves.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```