"""
Tests for elephas.options module.

Covers:
- Full default record from empty input
- Caller values winning over defaults
- TTL / force / as_entry coercion
- prefix, complete_key and hash derivation and overrides
- Determinism and idempotence
- Unrecognised keys preserved
"""

import pytest

from elephas.hashing import hashify
from elephas.options import CacheOptions, canonicalize, coerce_bool, coerce_ttl, is_blank
from elephas.timestamps import DEFAULT_TTL


class TestCanonicalizeDefaults:
    def test_empty_options_full_record(self):
        opts = canonicalize({}, "K", prefix="DEFAULT")

        assert opts.key == "K"
        assert opts.ttl == DEFAULT_TTL
        assert opts.force is False
        assert opts.as_entry is False
        assert opts.prefix == "DEFAULT"
        assert opts.complete_key == "DEFAULT[K]"
        assert opts.hash == hashify("DEFAULT[K]")
        assert opts.extra == {}

    @pytest.mark.parametrize("raw", [None, "options", 42, ["ttl", 5]])
    def test_non_mapping_treated_as_empty(self, raw):
        assert canonicalize(raw, "K", prefix="P") == canonicalize({}, "K", prefix="P")

    def test_deterministic(self):
        first = canonicalize({"ttl": 10}, "K", prefix="P")
        second = canonicalize({"ttl": 10}, "K", prefix="P")
        assert first == second

    def test_default_ttl_is_configurable(self):
        assert canonicalize({}, "K", prefix="P", default_ttl=5000).ttl == 5000


class TestCanonicalizeTtl:
    @pytest.mark.parametrize("raw_ttl, expected", [
        (1000, 1000),
        ("2500", 2500),
        (12.9, 12),
        (0, 0),
        (-30, 0),
    ])
    def test_values(self, raw_ttl, expected):
        assert canonicalize({"ttl": raw_ttl}, "K", prefix="P").ttl == expected

    @pytest.mark.parametrize("raw_ttl", [None, "", "   ", "soon"])
    def test_blank_or_garbage_is_default(self, raw_ttl):
        assert canonicalize({"ttl": raw_ttl}, "K", prefix="P").ttl == DEFAULT_TTL


class TestCanonicalizeFlags:
    @pytest.mark.parametrize("raw, expected", [
        (True, True),
        (False, False),
        (1, True),
        (0, False),
        (None, False),
        ("true", True),
        ("YES", True),
        ("false", False),
        ("0", False),
    ])
    def test_force_coerced(self, raw, expected):
        assert canonicalize({"force": raw}, "K", prefix="P").force is expected

    def test_as_entry_coerced(self):
        assert canonicalize({"as_entry": 1}, "K", prefix="P").as_entry is True


class TestCanonicalizeKeys:
    def test_caller_key_wins(self):
        opts = canonicalize({"key": "OTHER"}, "K", prefix="P")

        assert opts.key == "OTHER"
        assert opts.complete_key == "P[OTHER]"

    @pytest.mark.parametrize("prefix", [None, "", "  "])
    def test_blank_prefix_uses_default(self, prefix):
        assert canonicalize({"prefix": prefix}, "K", prefix="P").prefix == "P"

    def test_caller_prefix(self):
        opts = canonicalize({"prefix": "mine"}, "K", prefix="P")

        assert opts.prefix == "mine"
        assert opts.complete_key == "mine[K]"
        assert opts.hash == hashify("mine[K]")

    def test_complete_key_override(self):
        opts = canonicalize({"complete_key": "custom"}, "K", prefix="P")

        assert opts.complete_key == "custom"
        assert opts.hash == hashify("custom")

    def test_hash_override(self):
        opts = canonicalize({"hash": "abc"}, "K", prefix="P")

        assert opts.hash == "abc"
        assert opts.complete_key == "P[K]"

    def test_non_string_key(self):
        assert canonicalize({}, 42, prefix="P").complete_key == "P[42]"


class TestCacheOptions:
    def test_unrecognised_keys_preserved(self):
        opts = canonicalize({"region": "eu", "ttl": 5}, "K", prefix="P")

        assert opts.extra == {"region": "eu"}
        assert opts.get("region") == "eu"
        assert opts["region"] == "eu"
        assert opts.to_dict()["region"] == "eu"

    def test_mapping_access_to_fields(self):
        opts = canonicalize({}, "K", prefix="P")

        assert opts["ttl"] == DEFAULT_TTL
        assert opts.get("hash") == opts.hash
        assert opts.get("missing", "fallback") == "fallback"

    def test_frozen(self):
        opts = canonicalize({}, "K", prefix="P")

        with pytest.raises(AttributeError):
            opts.ttl = 5  # type: ignore[misc]

    def test_recanonicalizing_is_idempotent(self):
        opts = canonicalize({"ttl": 5, "region": "eu"}, "K", prefix="P")
        again = canonicalize(opts, "ignored", prefix="OTHER", default_ttl=1)

        assert isinstance(again, CacheOptions)
        assert again == opts


class TestCoercionHelpers:
    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank(" ")
        assert not is_blank(0)
        assert not is_blank("x")

    def test_coerce_bool_on_strings(self):
        assert coerce_bool(" on ") is True
        assert coerce_bool("nope") is False

    def test_coerce_ttl_rejects_booleans(self):
        assert coerce_ttl(True) == DEFAULT_TTL

    def test_coerce_ttl_infinite(self):
        assert coerce_ttl(float("inf"), 10) == 10
