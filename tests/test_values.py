"""
Tests for runtime values and hash keys.
"""

import hashlib

import pytest
from monkey.runtime import (
    ObjectType, Integer, String, Array, Hash, HashPair, HashKey,
    Builtin, ReturnValue, ErrorValue, Environment, Function,
    TRUE, FALSE, NULL,
    int_val, bool_val, string_val, array_val, error_val,
    is_error, is_truthy, type_name, wrap_int64,
)
from monkey import parse


class TestConstructors:
    """Test convenience constructors."""

    def test_int_value(self):
        """Integer value creation."""
        v = int_val(42)
        assert v.value == 42
        assert v.type == ObjectType.INTEGER

    def test_bool_singletons(self):
        """bool_val always returns one of the two singletons."""
        assert bool_val(True) is TRUE
        assert bool_val(False) is FALSE
        assert bool_val(1 == 1) is bool_val(True)

    def test_string_value(self):
        """String value creation."""
        v = string_val("hello")
        assert v.value == "hello"
        assert v.type == ObjectType.STRING

    def test_array_value_copies_list(self):
        """array_val does not alias the caller's list."""
        items = [int_val(1)]
        arr = array_val(items)
        items.append(int_val(2))
        assert len(arr.elements) == 1

    def test_error_value(self):
        """Error values carry their message."""
        err = error_val("boom")
        assert err.type == ObjectType.ERROR
        assert err.message == "boom"
        assert is_error(err)
        assert not is_error(int_val(1))
        assert not is_error(None)


class TestInt64Wrapping:
    """Test two's complement wrapping."""

    @pytest.mark.parametrize("n,expected", [
        (0, 0),
        (2 ** 63 - 1, 2 ** 63 - 1),
        (2 ** 63, -(2 ** 63)),
        (-(2 ** 63) - 1, 2 ** 63 - 1),
        (2 ** 64 + 5, 5),
    ])
    def test_wrap(self, n, expected):
        """Values outside 64 bits wrap around."""
        assert wrap_int64(n) == expected
        assert int_val(n).value == expected


class TestInspect:
    """Test display forms."""

    @pytest.mark.parametrize("value,expected", [
        (int_val(-7), "-7"),
        (TRUE, "true"),
        (FALSE, "false"),
        (NULL, "null"),
        (string_val("hi there"), "hi there"),
        (array_val([int_val(1), string_val("a"), TRUE]), "[1, a, true]"),
        (array_val([]), "[]"),
        (error_val("bad thing"), "ERROR: bad thing"),
        (ReturnValue(int_val(3)), "3"),
    ])
    def test_inspect(self, value, expected):
        """Each value type has a display form."""
        assert value.inspect() == expected

    def test_hash_inspect(self):
        """Hashes show key: value pairs."""
        h = Hash()
        key = string_val("a")
        h.pairs[key.hash_key()] = HashPair(key, int_val(1))
        assert h.inspect() == "{a: 1}"

    def test_function_inspect(self):
        """Functions show their parameters and body."""
        fn_lit = parse("fn(x, y) { x + y }").statements[0].expression
        fn = Function(fn_lit.parameters, fn_lit.body, Environment())
        assert fn.inspect() == "fn(x, y) {\n(x + y)\n}"

    def test_builtin_inspect(self):
        """Builtins have a fixed display form."""
        assert Builtin("noop", lambda *args: NULL).inspect() == "builtin function"

    def test_type_names(self):
        """Type names are what error messages print."""
        assert type_name(int_val(1)) == "INTEGER"
        assert type_name(NULL) == "NULL"
        assert type_name(None) == "NULL"
        assert str(ObjectType.HASH) == "HASH"


class TestHashKeys:
    """Test hash key identity."""

    def test_string_hash_keys(self):
        """Equal strings share a hash key, different strings do not."""
        hello1 = string_val("Hello World")
        hello2 = string_val("Hello World")
        diff1 = string_val("My name is johnny")
        diff2 = string_val("My name is johnny")
        assert hello1.hash_key() == hello2.hash_key()
        assert diff1.hash_key() == diff2.hash_key()
        assert hello1.hash_key() != diff1.hash_key()

    def test_string_hash_uses_sha256_prefix(self):
        """String hash is the first 8 bytes of SHA-256."""
        digest = hashlib.sha256("abc".encode("utf-8")).digest()
        expected = int.from_bytes(digest[:8], "big")
        assert string_val("abc").hash_key() == HashKey(ObjectType.STRING, expected)

    def test_string_hash_is_cached(self):
        """The key is computed once per string."""
        s = string_val("cached")
        assert s.hash_key() is s.hash_key()

    def test_integer_and_boolean_keys(self):
        """Integers and booleans key by value."""
        assert int_val(1).hash_key() == int_val(1).hash_key()
        assert TRUE.hash_key() == HashKey(ObjectType.BOOLEAN, 1)
        assert FALSE.hash_key() == HashKey(ObjectType.BOOLEAN, 0)

    def test_keys_distinguish_types(self):
        """1 and true never collide."""
        assert int_val(1).hash_key() != TRUE.hash_key()


class TestTruthiness:
    """Test truthiness rules."""

    @pytest.mark.parametrize("value,expected", [
        (TRUE, True),
        (FALSE, False),
        (NULL, False),
        (None, False),
        (int_val(0), True),
        (int_val(1), True),
        (string_val(""), True),
        (array_val([]), True),
    ])
    def test_is_truthy(self, value, expected):
        """Only false and null are falsy."""
        assert is_truthy(value) is expected
