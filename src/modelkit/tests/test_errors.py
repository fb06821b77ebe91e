"""Tests for the error taxonomy, ErrorInfo and the Result type.

Validates:
- Result functor/monad-style behaviour used by tool calls
- Error code classification
- Rendering of errors for the model
"""

from __future__ import annotations

import pytest

from modelkit.errors import (
    Err,
    ErrorCode,
    ErrorInfo,
    GenerationFailed,
    ModelKitError,
    ModelUnavailable,
    Ok,
    Result,
    SchemaDefinitionError,
    ToolExecutionFailed,
    ToolNotFound,
    classify_exception,
)


# ═════════════════════════════════════════════════════════════════════════════
# Result
# ═════════════════════════════════════════════════════════════════════════════


def test_map_identity() -> None:
    """map(id) leaves both variants unchanged"""
    assert Ok(42).map(lambda x: x) == Ok(42)
    assert Err("fail").map(lambda x: x) == Err("fail")


def test_map_composition() -> None:
    result: Result[int, str] = Ok(5)
    assert result.map(lambda x: (x * 2) + 1) == result.map(lambda x: x * 2).map(lambda x: x + 1)


def test_map_err_only_touches_errors() -> None:
    assert Err("fail").map_err(str.upper) == Err("FAIL")
    assert Ok(1).map_err(str.upper) == Ok(1)


def test_accessors() -> None:
    ok: Result[int, str] = Ok(3)
    err: Result[int, str] = Err("nope")
    assert (ok.ok(), ok.err(), ok.is_ok(), bool(ok)) == (3, None, True, True)
    assert (err.ok(), err.err(), err.is_err(), bool(err)) == (None, "nope", True, False)
    assert err.unwrap_or(0) == 0
    assert err.unwrap_err() == "nope"


def test_unwrap_reraises_held_exception() -> None:
    with pytest.raises(ToolNotFound):
        Err(ToolNotFound("teleport")).unwrap()
    with pytest.raises(RuntimeError):
        Err("plain").unwrap()
    with pytest.raises(RuntimeError):
        Ok(1).unwrap_err()


def test_pattern_matching() -> None:
    match Ok("payload"):
        case Result(value):
            assert value == "payload"


# ═════════════════════════════════════════════════════════════════════════════
# Classification & ErrorInfo
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(("exc", "code"), [
    (TimeoutError("upstream"), ErrorCode.TIMEOUT),
    (RuntimeError("connection timed out"), ErrorCode.TOOL_EXECUTION_FAILED),
    (ValueError("bad input"), ErrorCode.TOOL_EXECUTION_FAILED),
    (FileNotFoundError("cities.csv"), ErrorCode.TOOL_EXECUTION_FAILED),
    (LookupError("record notfound"), ErrorCode.TOOL_EXECUTION_FAILED),
    (ToolNotFound("x"), ErrorCode.TOOL_NOT_FOUND),
    (ModelUnavailable(), ErrorCode.MODEL_UNAVAILABLE),
])
def test_classify_exception(exc: BaseException, code: ErrorCode) -> None:
    assert classify_exception(exc) == code


def test_error_info_from_exception() -> None:
    info = ErrorInfo.from_exception("get_weather", TimeoutError("upstream"))
    assert info.source == "get_weather"
    assert info.code is ErrorCode.TIMEOUT
    assert info.is_retryable


def test_render_for_model() -> None:
    rendered = ToolExecutionFailed("get_weather", "service down").to_info("get_weather").render()
    assert rendered.startswith("**Tool Error (get_weather):** Tool execution failed (get_weather): service down")
    assert "may be recoverable" in rendered


def test_unrecoverable_errors_do_not_suggest_retry() -> None:
    assert "recoverable" not in GenerationFailed("refused").to_info().render()


def test_taxonomy() -> None:
    assert issubclass(SchemaDefinitionError, ValueError)
    assert issubclass(ToolNotFound, KeyError)
    assert all(issubclass(e, ModelKitError) for e in (GenerationFailed, ToolNotFound, SchemaDefinitionError))
    assert str(ToolNotFound("teleport")) == "No tool registered under 'teleport'"
