"""
Tests for source_files

Test Coverage:
- SourceFile: ids, size, from_path
- SourceFileList: add, add_paths, replace, remove, move, move_up/move_down
"""
import pytest

from source_files import SourceFile, SourceFileList, is_pdf_path

from conftest import build_pdf


@pytest.fixture
def abc():
    return SourceFileList([SourceFile(name, b"%PDF") for name in ("a.pdf", "b.pdf", "c.pdf")])


def test_ids_are_unique():
    first, second = SourceFile("same.pdf", b"x"), SourceFile("same.pdf", b"x")
    assert first.id != second.id
    assert first.size == 1


def test_from_path_reads_bytes(tmp_path):
    path = tmp_path / "doc.pdf"
    data = build_pdf(["A"])
    path.write_bytes(data)
    source = SourceFile.from_path(path)
    assert source.name == "doc.pdf"
    assert source.data == data
    assert source.path == str(path)


@pytest.mark.parametrize("path,expected", [
    ("report.pdf", True),
    ("REPORT.PDF", True),
    ("notes.txt", False),
    ("pdf", False),
])
def test_is_pdf_path(path, expected):
    assert is_pdf_path(path) is expected


def test_add_paths_skips_other_files(tmp_path):
    pdf = tmp_path / "keep.pdf"
    pdf.write_bytes(build_pdf(["K"]))
    txt = tmp_path / "skip.txt"
    txt.write_text("not a pdf")

    files = SourceFileList()
    added = files.add_paths([str(txt), str(pdf)])
    assert [f.name for f in added] == ["keep.pdf"]
    assert files.names() == ["keep.pdf"]


def test_move_reorders(abc):
    abc.move(0, 2)
    assert abc.names() == ["b.pdf", "c.pdf", "a.pdf"]
    abc.move(2, 0)
    assert abc.names() == ["a.pdf", "b.pdf", "c.pdf"]


def test_move_same_index_is_noop(abc):
    abc.move(1, 1)
    assert abc.names() == ["a.pdf", "b.pdf", "c.pdf"]


@pytest.mark.parametrize("src,dst", [(-1, 0), (0, 3), (5, 1)])
def test_move_out_of_range(abc, src, dst):
    with pytest.raises(IndexError):
        abc.move(src, dst)
    assert abc.names() == ["a.pdf", "b.pdf", "c.pdf"]


def test_move_up_and_down_stop_at_edges(abc):
    assert abc.move_up(0) == 0
    assert abc.move_down(2) == 2
    assert abc.move_down(0) == 1
    assert abc.names() == ["b.pdf", "a.pdf", "c.pdf"]
    assert abc.move_up(2) == 1
    assert abc.names() == ["b.pdf", "c.pdf", "a.pdf"]


def test_remove_by_id(abc):
    target = abc[1]
    removed = abc.remove(target.id)
    assert removed is target
    assert abc.names() == ["a.pdf", "c.pdf"]
    with pytest.raises(KeyError):
        abc.remove(target.id)


def test_replace_keeps_single_file(abc):
    newcomer = SourceFile("new.pdf", b"%PDF")
    assert abc.replace(newcomer) is True
    assert abc.names() == ["new.pdf"]

    empty = SourceFileList()
    assert empty.replace(newcomer) is False
    assert len(empty) == 1


def test_clear(abc):
    abc.clear()
    assert not abc
    assert abc.files == []
