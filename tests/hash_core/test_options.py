"""
tests/hash_core/test_options.py
Tests del registro de opciones.
"""
import unittest
import pytest
from dataclasses import FrozenInstanceError
from hash_core.options import DEFAULT_OPTIONS, HashOptions


class TestHashOptions(unittest.TestCase):

    def test_none_gives_defaults(self):
        self.assertIs(HashOptions.coerce(None), DEFAULT_OPTIONS)
        self.assertIsNone(DEFAULT_OPTIONS.find_root)

    def test_instances_pass_through(self):
        opts = HashOptions(find_root="a.b")
        self.assertIs(HashOptions.coerce(opts), opts)

    def test_mapping_spellings(self):
        self.assertEqual(HashOptions.coerce({"findRoot": "x"}).find_root, "x")
        self.assertEqual(HashOptions.coerce({"find_root": "y"}).find_root, "y")

    def test_unknown_keys_rejected(self):
        with pytest.raises(TypeError):
            HashOptions.coerce({"findroot": "x"})

    def test_non_mapping_rejected(self):
        with pytest.raises(TypeError):
            HashOptions.coerce("population")

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_OPTIONS.find_root = "x"


if __name__ == '__main__':
    unittest.main()
