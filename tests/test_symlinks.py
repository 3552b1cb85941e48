"""Tests for symbolic link handling during ellipsis expansion."""

import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from wildglob import Wildcard
from wildglob.testing import Symlink, make_tree


@pytest.mark.skipif(not hasattr(os, "symlink") or sys.platform == "win32",
                    reason="symlinks not available")
class TestSymlinks(unittest.TestCase):
    """Test follow and cycle detection."""

    def setUp(self):
        """Create test directory structure."""
        self.temp_dir = tempfile.mkdtemp()
        self.base = self.temp_dir

    def tearDown(self):
        """Clean up test directory."""
        shutil.rmtree(self.temp_dir)

    def p(self, rel=""):
        return f"{self.base}/{rel}"

    def expand(self, spec, **options):
        options.setdefault("sort", True)
        options.setdefault("case_insensitive", False)
        return Wildcard(spec, **options).all()

    def test_symlinked_directory_not_entered_by_default(self):
        """Test ellipsis does not descend through a symlink unless asked."""
        make_tree(self.base, {
            "data": {"a.txt": ""},
            "tree": {"ln": Symlink("../data")},
        })
        self.assertEqual(self.expand(self.p("tree///*.txt")), [])

    def test_follow_enters_symlinked_directory(self):
        """Test follow descends through symlinked directories."""
        make_tree(self.base, {
            "data": {"a.txt": ""},
            "tree": {"ln": Symlink("../data")},
        })
        self.assertEqual(self.expand(self.p("tree///*.txt"), follow=True), [self.p("tree/ln/a.txt")])

    def test_unfollowed_link_reported_as_leaf(self):
        """Test a symlinked directory is listed without a trailing '/'."""
        make_tree(self.base, {
            "data": {"a.txt": ""},
            "tree": {"ln": Symlink("../data")},
        })
        self.assertEqual(self.expand(self.p("tree///")), [self.p("tree/"), self.p("tree/ln")])

    def test_literal_symlink_is_traversed(self):
        """Test symlinks named literally are always traversed."""
        make_tree(self.base, {
            "data": {"a.txt": ""},
            "tree": {"ln": Symlink("../data")},
        })
        self.assertEqual(self.expand(self.p("tree/ln/*.txt")), [self.p("tree/ln/a.txt")])

    def test_self_cycle_terminates(self):
        """Test a link back to an enclosing directory is not re-entered."""
        make_tree(self.base, {
            "top": {
                "back": Symlink("../top"),
                "file.txt": "",
                "inner": {"deep.txt": ""},
            },
        })
        expected = [
            self.p("top/"),
            self.p("top/back"),
            self.p("top/file.txt"),
            self.p("top/inner/"),
            self.p("top/inner/deep.txt"),
        ]
        self.assertEqual(self.expand(self.p("top///")), expected)
        self.assertEqual(self.expand(self.p("top///"), follow=True), expected)

    def test_mutual_cycle_terminates(self):
        """Test two directories linking to each other."""
        make_tree(self.base, {
            "x": {"to_y": Symlink("../y")},
            "y": {"to_x": Symlink("../x")},
        })
        found = self.expand(self.p("//"), follow=True)
        self.assertEqual(found, [
            self.p(""),
            self.p("x/"),
            self.p("x/to_y/"),
            self.p("x/to_y/to_x"),
            self.p("y/"),
            self.p("y/to_x/"),
            self.p("y/to_x/to_y"),
        ])

    def test_cycle_in_breadth_first(self):
        """Test cycle detection with breadth-first order."""
        make_tree(self.base, {"loop": {"self": Symlink("."), "f.txt": ""}})
        found = self.expand(self.p("loop///"), follow=True, ellipsis_order="breadth-first")
        self.assertEqual(found, [self.p("loop/f.txt"), self.p("loop/self")])

    def test_follow_on_queued_path(self):
        """Test follow can be set per appended path."""
        make_tree(self.base, {
            "data": {"a.txt": ""},
            "tree": {"ln": Symlink("../data")},
        })
        wc = Wildcard(None, sort=True, case_insensitive=False)
        wc.append(self.p("tree///*.txt"))
        wc.append(self.p("tree///*.txt"), follow=True)
        self.assertEqual(wc.all(), [self.p("tree/ln/a.txt")])


if __name__ == "__main__":
    unittest.main()
