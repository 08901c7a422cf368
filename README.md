# sbitxkit

Building blocks for the station software of a software-defined HF
transceiver, usable on their own from Python:

- `sbitxkit.fft_filter`: Kaiser-windowed FIR band-pass filters in the
  frequency domain (`FftFilter`), plus `make_kaiser`, `make_hann_window`,
  `window_filter` and the Bessel helpers `i0` and `i1`.
- `sbitxkit.logbook`: a SQLite QSO logbook (`Logbook`) with duplicate
  checks (`count_dup`), grid and callsign lookups (`grid_exists`,
  `caller_exists`, `get_grids`, `prev_log`), paging (`fetch`), and
  `add`, `update` and `delete`. The table and its indexes are created
  when the database is opened.
- `sbitxkit.logbook_export`: ADIF export (`export_adif`), band lookup
  (`band_for`) and plain-text query dumps (`write_query_results`).
- `sbitxkit.hist_disp`: markup for FT8 console lines, highlighting calls
  and grids not yet in the log (`decorate`, `strip_decoration`,
  `length_no_decoration`), and `create_grid_list`, which writes the
  logged grid squares to a file.
- `sbitxkit.wsjtx`: a non-blocking UDP listener for WSJT-X decode
  datagrams (`WsjtxListener`), with `parse_datagram` and the `Decode`
  record it returns.
- `sbitxkit.macros`: function-key macro files (`.mc`) with `{VAR}` and
  short-hand expansion (`MacroSet`, `Macro`, `list_macros`).
- `sbitxkit.ini`: a small INI parser (`parse`, `parse_string`,
  `parse_file`, `load`) that raises `IniParseError` on malformed lines.
- `sbitxkit.records`: a flat `key=value` settings store (`RecordStore`).
- `sbitxkit.resampler`: linear-interpolation resampling (`resample`).

## Installing

```
pip install sbitxkit
```

For running the test suite:

```
pip install "sbitxkit[test]"
pytest
```

## Examples

A 300–3000 Hz band-pass filter at 96 kHz sampling:

```python
from sbitxkit.fft_filter import FftFilter

filt = FftFilter(1024, 1025)
filt.tune(300 / 96000, 3000 / 96000, 5)
print(filt.format_coefficients())
```

Reading settings:

```python
from sbitxkit.records import RecordStore

store = RecordStore("sbitx.rc")
store.load()
mic_gain = store.get_integer("mic_gain", 70)
mode = store.get_string("mode", "USB")
store.set_integer("mic_gain", 80)
store.save()
```

Working with the logbook:

```python
from sbitxkit.logbook import Logbook
from sbitxkit.logbook_export import export_adif

with Logbook("sbitx.db") as log:
    if not log.caller_exists("N0CALL"):
        print("new station")
    export_adif(log, "contacts.adi", "2024-01-01", "2024-12-31")
```

Marking up an FT8 line and stripping the markup again:

```python
from sbitxkit.hist_disp import Style, decorate, strip_decoration

decorated = decorate(Style.FT8_RX, "-12 0.1 1500~ CQ N0CALL AB12", "N0CALL")
plain = strip_decoration(decorated)
```

Printing WSJT-X decodes as they arrive:

```python
import time
from sbitxkit.wsjtx import WsjtxListener

with WsjtxListener() as listener:
    while True:
        listener.poll()
        time.sleep(0.001)
```

## Commands

`sbitx-resample` resamples a short test waveform from 20 to 24 samples and
prints the input and output samples side by side.

```
sbitx-resample
```

## What this package does not do

It has no network server through which logging programs could tune the
radio or key the transmitter, no receive or transmit signal processing
chain, no audio or hardware access, and no graphical windows. It also has
no command for regenerating the host's SSH keys.