"""
Tests for the source collector.
"""

import os

import pytest

from conftest import write_json
from gitbuild.gitbuild_exceptions import InvalidManifest
from gitbuild.gitbuild_logger import GitbuildLogger
from gitbuild.source_collector import FileKind, SourceCollector, SourceSet, classify


@pytest.fixture
def collector():
    return SourceCollector(GitbuildLogger())


class TestClassify:
    """The closed set of recognized extensions."""

    @pytest.mark.parametrize("path", ["a.h", "a.hh", "a.hpp", "a.hxx", "a.h++", "a.inl", "x/A.HPP"])
    def test_headers(self, path):
        assert classify(path) is FileKind.HEADER

    @pytest.mark.parametrize("path", ["a.c", "a.cc", "a.cpp", "a.cxx", "a.c++", "x/A.CXX"])
    def test_sources(self, path):
        assert classify(path) is FileKind.SOURCE

    @pytest.mark.parametrize("path", ["README.md", "a.cs", "a.css", "Makefile", "a.hs"])
    def test_other(self, path):
        assert classify(path) is FileKind.OTHER


class TestSourceCollector:
    """Tests for SourceCollector on temporary trees."""

    def test_dependency_files_are_resolved_relative_to_manifest(self, collector, tmp_path):
        write_json(tmp_path / "package.json", {"files": ["index.cxx"]})
        write_json(
            tmp_path / "deps" / "org" / "lib" / "package.json",
            {"files": ["src/a.cxx", "include/a.hxx"]},
        )

        source_set = collector.collect(str(tmp_path))

        lib = os.path.join(str(tmp_path), "deps", "org", "lib")
        assert os.path.join(lib, "src", "a.cxx") in source_set.compilation_units
        assert source_set.include_directories == [os.path.join(lib, "include")]

    def test_root_manifest_is_visited_before_subdirectories(self, collector, tmp_path):
        write_json(tmp_path / "package.json", {"files": ["z.cxx"]})
        write_json(tmp_path / "a" / "package.json", {"files": ["a.cxx"]})

        source_set = collector.collect(str(tmp_path))

        assert source_set.compilation_units == [
            os.path.join(str(tmp_path), "z.cxx"),
            os.path.join(str(tmp_path), "a", "a.cxx"),
        ]

    def test_hidden_directories_are_skipped(self, collector, tmp_path):
        write_json(tmp_path / "package.json", {"files": ["index.cxx"]})
        write_json(tmp_path / ".git" / "package.json", {"files": ["hidden.cxx"]})
        write_json(tmp_path / "deps" / ".cache" / "package.json", {})

        source_set = collector.collect(str(tmp_path))

        assert source_set.compilation_units == [os.path.join(str(tmp_path), "index.cxx")]

    def test_symlinked_directories_are_not_followed(self, collector, tmp_path):
        write_json(tmp_path / "package.json", {"files": ["index.cxx"]})
        write_json(tmp_path / "deps" / "org" / "lib" / "package.json", {"files": ["lib.cxx"]})
        os.symlink(str(tmp_path), str(tmp_path / "deps" / "org" / "lib" / "loop"))

        source_set = collector.collect(str(tmp_path))

        assert source_set.compilation_units == [
            os.path.join(str(tmp_path), "index.cxx"),
            os.path.join(str(tmp_path), "deps", "org", "lib", "lib.cxx"),
        ]

    def test_include_directories_are_deduplicated_in_order(self, collector, tmp_path):
        write_json(
            tmp_path / "package.json",
            {"files": ["include/b.hxx", "src/main.cxx", "include/a.hxx", "other/c.h"]},
        )
        write_json(tmp_path / "deps" / "x" / "y" / "package.json", {"files": ["y.hpp", "z.hpp"]})

        source_set = collector.collect(str(tmp_path))

        assert source_set.include_directories == [
            os.path.join(str(tmp_path), "include"),
            os.path.join(str(tmp_path), "other"),
            os.path.join(str(tmp_path), "deps", "x", "y"),
        ]

    def test_legacy_main_entry(self, collector, tmp_path):
        write_json(tmp_path / "package.json", {"main": "index.cc"})

        source_set = collector.collect(str(tmp_path))

        assert source_set.compilation_units == [os.path.join(str(tmp_path), "index.cc")]

    def test_manifest_without_file_list_is_fatal(self, collector, tmp_path):
        write_json(tmp_path / "package.json", {"files": []})
        write_json(tmp_path / "deps" / "org" / "bad" / "package.json", {"name": "bad"})

        with pytest.raises(InvalidManifest) as excinfo:
            collector.collect(str(tmp_path))
        assert "files" in excinfo.value.message

    def test_unrecognized_files_are_ignored(self, collector, tmp_path):
        write_json(tmp_path / "package.json", {"files": ["README.md", "main.cpp"]})

        source_set = collector.collect(str(tmp_path))

        assert source_set.compilation_units == [os.path.join(str(tmp_path), "main.cpp")]
        assert source_set.include_directories == []

    def test_source_set_add_include_directory(self):
        source_set = SourceSet()
        source_set.add_include_directory("/a")
        source_set.add_include_directory("/b")
        source_set.add_include_directory("/a")
        assert source_set.include_directories == ["/a", "/b"]
