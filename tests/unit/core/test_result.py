"""Unit tests for the Result type."""

from pspublisher.core.result import Err, Ok


class TestMap:
    """Tests for map."""

    def test_ok_applies_function(self) -> None:
        assert Ok(2).map(lambda v: v * 3) == Ok(6)

    def test_err_is_unchanged(self) -> None:
        called: list[int] = []
        result = Err("boom").map(lambda v: called.append(v))

        assert result == Err("boom")
        assert called == []


class TestPatternMatching:
    """Results can be destructured with match."""

    def test_match(self) -> None:
        def describe(result: Ok[int] | Err[str]) -> str:
            match result:
                case Ok(value):
                    return f"ok {value}"
                case Err(error):
                    return f"err {error}"
            return "unreachable"

        assert describe(Ok(1)) == "ok 1"
        assert describe(Err("x")) == "err x"
