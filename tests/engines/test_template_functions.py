"""Unit tests for engines.text.functions."""

import pytest

from templating.engines.text.functions import (
    TEMPLATE_FUNCS,
    b64dec,
    b64enc,
    default_if_empty,
    from_json,
    humanize_bytes,
    humanize_duration,
    kebab_case,
    quote,
    sha256,
    snake_case,
    split,
    squote,
    to_json,
    trim_prefix,
    trim_suffix,
)


class TestEncoding:
    def test_json(self) -> None:
        assert to_json({"b": 1, "a": [1, 2]}) == '{"b": 1, "a": [1, 2]}'
        assert to_json({"b": 1, "a": 2}, indent=2) == '{\n  "a": 2,\n  "b": 1\n}'
        assert from_json('{"a": 1}') == {"a": 1}
        assert from_json("") is None
        assert from_json(None) is None

    def test_base64(self) -> None:
        assert b64enc("hi") == "aGk="
        assert b64enc(b"hi") == "aGk="
        assert b64dec("aGk=") == "hi"
        with pytest.raises(ValueError):
            b64dec("not base64!")

    def test_sha256(self) -> None:
        assert sha256("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestStrings:
    def test_trim(self) -> None:
        assert trim_prefix("arn:aws:x", "arn:") == "aws:x"
        assert trim_suffix("file.yaml", ".yaml") == "file"
        assert trim_prefix(None, "x") == ""

    def test_split(self) -> None:
        assert split("a,b", ",") == ["a", "b"]
        assert split("a b") == ["a", "b"]
        assert split(None) == []

    def test_quote(self) -> None:
        assert quote('say "hi"') == '"say \\"hi\\""'
        assert squote("it's") == "'it\\'s'"
        assert quote(None) == '""'

    def test_case(self) -> None:
        assert snake_case("HelloWorld-foo") == "hello_world_foo"
        assert kebab_case("HelloWorld_foo") == "hello-world-foo"
        assert snake_case("AWS::EC2::Instance") == "aws::ec2::instance"

    def test_default_if_empty(self) -> None:
        assert default_if_empty("", "x") == "x"
        assert default_if_empty([], "x") == "x"
        assert default_if_empty(None, "x") == "x"
        assert default_if_empty(0, "x") == 0
        assert default_if_empty("v", "x") == "v"


class TestHumanize:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0, "0B"), (512, "512B"), (1536, "1.5KiB"), (1024**3 * 2, "2.0GiB"), (1024**6, "1024.0PiB")],
    )
    def test_bytes(self, value: int, expected: str) -> None:
        assert humanize_bytes(value) == expected

    def test_duration(self) -> None:
        assert humanize_duration(0) == "0s"
        assert humanize_duration(3725) == "1h2m5s"
        assert humanize_duration(90000) == "1d1h"
        assert humanize_duration(-61) == "-1m1s"


def test_registry_contains_all_functions() -> None:
    assert TEMPLATE_FUNCS["quote"] is quote
    assert all(callable(fn) for fn in TEMPLATE_FUNCS.values())
