import sys

from consola.error_chain import collect_chain, format_chain_lines


def _chain(*messages):
    """Build an exception chain; the first message is the innermost cause."""
    err = None
    for message in messages:
        outer = RuntimeError(message)
        outer.__cause__ = err
        err = outer
    return err


def test_error_chain_depth_limiting():
    err = _chain("error 1", "error 2", "error 3", "error 4", "error 5")
    chain = collect_chain(err)
    assert len(chain) == 5

    limited_2 = format_chain_lines(chain, 2)
    assert len(limited_2) == 2
    assert "error 5" in limited_2[0]
    assert "Caused by:" in limited_2[1]
    assert "error 4" in limited_2[1]

    limited_3 = format_chain_lines(chain, 3)
    assert len(limited_3) == 3

    unlimited = format_chain_lines(chain, sys.maxsize)
    assert len(unlimited) == 5


def test_unlimited_depth_with_none():
    chain = collect_chain(_chain("a", "b", "c"))
    assert format_chain_lines(chain, None) == ["c", "Caused by: b", "Caused by: a"]


def test_error_chain_cycle_detection():
    first = RuntimeError("first")
    second = RuntimeError("second")
    first.__cause__ = second
    second.__cause__ = first
    chain = collect_chain(first)
    assert chain == ["first", "second"]


def test_error_chain_multi_level_nested():
    io_err = FileNotFoundError("file not found")
    middle = RuntimeError("Failed to read config")
    middle.__cause__ = io_err
    top = RuntimeError("Application initialization failed")
    top.__cause__ = middle

    chain = collect_chain(top)
    assert len(chain) >= 3

    formatted = format_chain_lines(chain, sys.maxsize)
    assert not formatted[0].startswith("Caused by:")
    for line in formatted[1:]:
        assert line.startswith("Caused by:")
    assert "Application initialization" in "\n".join(formatted)


def test_error_chain_empty_source():
    chain = collect_chain(RuntimeError("single error"))
    assert len(chain) == 1
    assert "single error" in chain[0]


def test_implicit_context_is_followed():
    try:
        try:
            raise ValueError("inner")
        except ValueError:
            raise RuntimeError("outer")
    except RuntimeError as err:
        chain = collect_chain(err)
    assert chain == ["outer", "inner"]


def test_suppressed_context_is_not_followed():
    try:
        try:
            raise ValueError("inner")
        except ValueError:
            raise RuntimeError("outer") from None
    except RuntimeError as err:
        chain = collect_chain(err)
    assert chain == ["outer"]


def test_zero_depth_gives_no_lines():
    assert format_chain_lines(["only"], 0) == []