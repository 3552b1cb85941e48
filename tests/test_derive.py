"""Tests for derived path construction."""

import os
import re
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from wildglob import Wildcard, DerivationError
from wildglob.core.derive import Deriver, parse_template
from wildglob.testing import make_tree


class TestTemplates(unittest.TestCase):
    """Test template parsing and substitution."""

    def test_parse_plain_text(self):
        """Test templates without references."""
        self.assertEqual(parse_template("obj/out.o"), ("obj/out.o",))

    def test_parse_references(self):
        """Test $n, ${n} and $$."""
        self.assertEqual(parse_template("$1.o"), (1, ".o"))
        self.assertEqual(parse_template("${1}0"), (1, "0"))
        self.assertEqual(parse_template("cost$$$2"), ("cost", "$", 2))

    def test_derive(self):
        """Test substitution of capture groups."""
        deriver = Deriver(["src/$1.o", "src/$1.hpp"])
        matcher = re.compile(r"^src/(.*)\.cpp$")
        self.assertEqual(
            deriver.derive("src/foo.cpp", matcher),
            ["src/foo.cpp", "src/foo.o", "src/foo.hpp"],
        )

    def test_whole_match(self):
        """Test $0 is the whole match."""
        deriver = Deriver(["$0.bak"])
        self.assertEqual(deriver.derive("a.txt", re.compile(r"a\.txt")), ["a.txt", "a.txt.bak"])

    def test_unmatched_group_is_empty(self):
        """Test groups that did not participate substitute as empty."""
        deriver = Deriver(["[$1][$2]"])
        matcher = re.compile(r"(x)?(y)")
        self.assertEqual(deriver.derive("y", matcher), ["y", "[][y]"])

    def test_templates_are_not_evaluated(self):
        """Test template text is copied literally."""
        deriver = Deriver(["${__import__('os')}", "$(rm -rf /)"])
        matcher = re.compile(r"(a)")
        self.assertEqual(
            deriver.derive("a", matcher),
            ["a", "${__import__('os')}", "$(rm -rf /)"],
        )

    def test_out_of_range_reference(self):
        """Test referencing a missing group raises."""
        deriver = Deriver(["$1", "$3"])
        with self.assertRaises(DerivationError) as ctx:
            deriver.derive("ab", re.compile(r"(a)(b)"))
        self.assertEqual(ctx.exception.index, 3)
        self.assertEqual(ctx.exception.groups, 2)


class TestDeriveExpansion(unittest.TestCase):
    """Test derive through Wildcard."""

    def setUp(self):
        """Create test directory structure."""
        self.temp_dir = tempfile.mkdtemp()
        make_tree(self.temp_dir, {
            "src": {
                "foo.cpp": "",
                "foo.hpp": "",
                "sub": {"bar.cpp": ""},
            },
        })
        self.old_cwd = os.getcwd()
        os.chdir(self.temp_dir)

    def tearDown(self):
        """Clean up test directory."""
        os.chdir(self.old_cwd)
        shutil.rmtree(self.temp_dir)

    def test_explicit_match_and_templates(self):
        """Test results are [path, derived...] lists."""
        wc = Wildcard(
            "src///*.cpp",
            match=r"^src/(.*)\.cpp$",
            derive=["src/$1.o", "src/$1.hpp"],
            sort=True,
        )
        self.assertEqual(wc.next(), ["src/foo.cpp", "src/foo.o", "src/foo.hpp"])
        self.assertEqual(wc.next(), ["src/sub/bar.cpp", "src/sub/bar.o", "src/sub/bar.hpp"])
        self.assertIsNone(wc.next())

    def test_generated_match_groups(self):
        """Test derive against the generated matcher's groups."""
        found = Wildcard("src///*.cpp", derive=["obj/$1$2.o"], sort=True).all()
        self.assertEqual(found, [
            ["src/foo.cpp", "obj/foo.o"],
            ["src/sub/bar.cpp", "obj/sub/bar.o"],
        ])

    def test_derived_paths_need_not_exist(self):
        """Test derived paths are not checked on disk."""
        found = Wildcard("src/*.hpp", derive=["gen/$1.h"]).all()
        self.assertEqual(found, [["src/foo.hpp", "gen/foo.h"]])

    def test_error_raised_when_producing_result(self):
        """Test a bad reference is reported by next(), not construction."""
        wc = Wildcard("src/*.cpp", match=r"^src/(.*)\.cpp$", derive=["$1.$2"])
        with self.assertRaises(DerivationError):
            wc.next()

    def test_fixing_match_recovers(self):
        """Test replacing match makes the templates valid."""
        wc = Wildcard("src/*.cpp", match=r"^src/(.*)\.cpp$", derive=["$1.$2"])
        with self.assertRaises(DerivationError):
            wc.next()
        wc.match = r"^src/(.*)\.(cpp)$"
        wc.reset()
        self.assertEqual(wc.next(), ["src/foo.cpp", "foo.cpp"])


if __name__ == "__main__":
    unittest.main()
