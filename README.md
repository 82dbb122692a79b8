# consola

A console logger for Python. It prints typed log lines with optional colours,
icons and badges. It can draw boxes and collapse repeated messages. It can also
write structured JSON or keep records in memory for tests.

## Installation

```
pip install consola
```

## Quick start

```python
from consola.logger import Logger
from consola.reporters import FancyReporter

with Logger(FancyReporter.adaptive()) as logger:
    logger.info("Server starting")
    logger.success("Build completed")
    logger.warn("Low disk space")
    logger.error("Failed to connect")
```

`Logger.log(type_name, *args, tag=None)` joins its arguments with spaces.
`Logger.log_raw(type_name, message, tag=None)` logs a preformatted message.
The logger also has shorthands for common types:

- `info`, `warn`, `error`, `success`, `debug` and `trace`;
- the raw forms `info_raw`, `warn_raw`, `error_raw`, `debug_raw`,
  `trace_raw`, `success_raw`, `fail_raw` and `fatal_raw`;
- `log_type_raw(type_name, message)` for any other type.

Records at error level or more severe go to standard error. All others go to
standard output.

## Levels and types

Every log type maps to a numeric `LogLevel`. A lower number is more severe.

| type            | level |
|-----------------|-------|
| silent          | -99   |
| fatal           | 0     |
| error           | 1     |
| warn            | 2     |
| log, start, box | 3     |
| info, ready     | 4     |
| success, fail   | 5     |
| debug           | 6     |
| trace           | 7     |
| verbose         | 99    |

A type that is not registered gets level 3 (`LogLevel.LOG`). A record is
reported when its level is at or below the logger's `level`. You can change
that level with `set_level`.

To add your own types:

```python
from consola.levels import LogLevel, LogTypeSpec, level_for_type, register_type

register_type("audit", LogTypeSpec(level=LogLevel(3)))
assert level_for_type("audit") == LogLevel(3)
```

`normalize_level` accepts a number such as `"2"` or a type name such as
`"warn"`.

## Reporters

All reporters live in `consola.reporters`.

- `BasicReporter` prints a date, then `[type]`, an optional `[tag]` and the
  message. It can add ANSI styling. It wraps to the terminal width.
- `FancyReporter` adds these to the basic output:
  - type icons, with ASCII stand-ins when `unicode` is off;
  - uppercase type badges;
  - a framed box for records of type `box`.
- `JsonReporter` writes one compact JSON object per line. Keys are sorted. The
  object has the fields `schema`, `level`, `level_name`, `type` and, when
  present, `time`, `tag`, `message`, `args`, `additional`, `repeat`, `stack`,
  `causes` and `meta`.
- `MemoryReporter` keeps copies of records. `get_records()` returns them,
  `clear()` empties the store, and `len()` tells how many it holds.

`FormatOptions` in `consola.format` controls the output. It has these
switches:

- `date`, `colors` and `unicode`;
- `show_type`, `show_tag`, `show_repetition`, `show_stack`, `show_additional`
  and `show_meta`;
- `error_level`, the number of causes shown;
- `columns`;
- `force_simple_width`.

`FormatOptions.adaptive()` reads the environment:

- `NO_COLOR` turns colours off.
- `FORCE_COLOR` turns them on unless it is empty or `0`.
- `CONSOLA_COMPACT=1` sets `compact`.
- The width comes from `COLUMNS`, or from the terminal.

## Throttling

Identical records that follow each other inside a time window are collapsed.
The first record is reported at once. When the repeat count reaches
`min_count`, the record is reported again with an `(xN)` suffix. Repeats that
have not yet been reported come out when the window expires or a different
record arrives. They also come out on `flush()`.

```python
from consola.logger import LoggerBuilder
from consola.reporters import MemoryReporter
from consola.throttling import ThrottleConfig

reporter = MemoryReporter()
logger = (
    LoggerBuilder()
    .with_reporter(reporter)
    .with_throttle_config(ThrottleConfig(window=0.2, min_count=3))
    .build()
)
```

The window is measured in seconds. By default it is 0.5 seconds with
`min_count=2`.

## Building loggers

```python
from consola.logger import LoggerBuilder

logger = LoggerBuilder().from_env().build()  # honours CONSOLA_LEVEL
```

`CONSOLA_LEVEL` takes a number or a type name such as `error`. If you call
`with_level` after `from_env()`, it overrides the environment.

`with_defaults(RecordDefaults(...))` sets a tag, additional arguments and meta
pairs. These are merged into every record. Values already set on a record win.

`LoggerConfig` gives further settings:

- a `queue_capacity` for paused logging, where the oldest entries are dropped
  first;
- a `clock`. `consola.clock.MockClock` gives timestamps that only move when
  you call `advance(seconds)`.

## Pausing, mocking and closing

- `pause()` queues records. `resume()` replays them in order.
- `set_mock(fn)` calls `fn` with each record before the reporter sees it.
  `clear_mock()` removes it.
- `close()`, or leaving a `with` block, flushes any pending repetitions.

## Utilities

`consola.utils` provides the following:

- `strip_ansi`
- `align_text` with `Alignment`
- `TreeFormatter`
- `BoxBuilder`
- `parse_error_stack`
- the colour helpers `colored`, `dim` and `bold`, which prefix text with an
  SGR code and do not append a reset;
- `AnsiColor`
- the sinks `StdoutSink`, `StderrSink` and `TestSink`

`consola.error_chain` has two functions. `collect_chain` collects the messages
of an exception and its causes. `format_chain_lines` formats them with
`Caused by:` prefixes.

`consola.prompt` provides `DefaultPrompt`. It offers line-based `text`,
`confirm`, `select` and `multiselect` prompts, read through `input` or through
a function you pass in. A `PromptCancelStrategy` decides the outcome when the
user cancels with end-of-input or Ctrl-C.

## What it does not do

- There is no global logger and there are no module-level logging functions.
  Create a `Logger` and call its methods.
- There is no command-line program.
- The package does not hook into the standard `logging` module.

## Running the tests

```
pip install -e ".[test]"
pytest
```