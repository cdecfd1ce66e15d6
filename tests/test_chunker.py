import pytest

from doc_indexer.core.errors import InvalidParametersError
from doc_indexer.embeddings.chunker import (
    chunk_document,
    chunk_text,
    find_word_boundary,
    normalize_whitespace,
)


LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim "
    "veniam, quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea "
    "commodo consequat. Duis aute irure dolor in reprehenderit in voluptate "
    "velit esse cillum dolore eu fugiat nulla pariatur."
)


def _start_offsets(text, chunks):
    """Locate each chunk in the normalized text, scanning left to right."""
    normalized = normalize_whitespace(text)
    offsets = []
    pos = 0
    for chunk in chunks:
        found = normalized.find(chunk, pos)
        assert found >= 0
        offsets.append(found)
        pos = found + 1
    return offsets


class TestChunkText:
    def test_example_is_word_aligned(self):
        chunks = chunk_text("one two three four five", chunk_size=10, overlap=3)

        assert chunks == ["one two", "three four", "five"]
        tokens = "one two three four five".split()
        covered = [t for c in chunks for t in c.split()]
        assert sorted(set(covered), key=tokens.index) == tokens

    def test_short_text_is_single_normalized_chunk(self):
        assert chunk_text("  hello \n\t world  ", chunk_size=50, overlap=5) == ["hello world"]

    def test_text_equal_to_chunk_size(self):
        assert chunk_text("abcde", chunk_size=5, overlap=1) == ["abcde"]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t  \n", None])
    def test_empty_input_yields_nothing(self, text):
        assert chunk_text(text, chunk_size=10, overlap=2) == []

    @pytest.mark.parametrize(
        "chunk_size, overlap",
        [(0, 0), (-5, 1), (10, 10), (10, 20), (10, -1)],
    )
    def test_invalid_parameters(self, chunk_size, overlap):
        with pytest.raises(InvalidParametersError):
            chunk_text("some text here", chunk_size=chunk_size, overlap=overlap)

    def test_invalid_parameters_rejected_even_for_empty_text(self):
        with pytest.raises(InvalidParametersError):
            chunk_text("", chunk_size=5, overlap=5)

    @pytest.mark.parametrize("chunk_size, overlap", [(20, 5), (40, 10), (60, 59), (100, 0)])
    def test_chunks_respect_size_and_boundaries(self, chunk_size, overlap):
        chunks = chunk_text(LOREM, chunk_size=chunk_size, overlap=overlap)
        words = set(normalize_whitespace(LOREM).split())

        assert len(chunks) > 1
        for chunk in chunks:
            assert 0 < len(chunk) <= chunk_size
            # No word is severed at a chunk edge.
            assert all(w in words for w in chunk.split())
            assert normalize_whitespace(chunk) == chunk

    @pytest.mark.parametrize("chunk_size, overlap", [(20, 5), (33, 12), (80, 30)])
    def test_start_offsets_strictly_increase(self, chunk_size, overlap):
        chunks = chunk_text(LOREM, chunk_size=chunk_size, overlap=overlap)
        offsets = _start_offsets(LOREM, chunks)

        assert offsets == sorted(set(offsets))
        assert offsets[0] == 0

    def test_chunks_overlap_when_overlap_exceeds_word_length(self):
        chunks = chunk_text(LOREM, chunk_size=60, overlap=25)

        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev.split()[-1] in nxt.split()

    def test_every_word_is_covered(self):
        chunks = chunk_text(LOREM, chunk_size=45, overlap=10)
        covered = {w for c in chunks for w in c.split()}

        assert covered == set(normalize_whitespace(LOREM).split())

    def test_text_without_spaces_terminates(self):
        text = "x" * 1000
        chunks = chunk_text(text, chunk_size=100, overlap=99)

        assert chunks
        assert all(len(c) <= 100 for c in chunks)

    def test_single_long_word_is_cut(self):
        text = "a " + "b" * 30 + " c"
        chunks = chunk_text(text, chunk_size=10, overlap=2)

        assert chunks[0] == "a"
        assert all(len(c) <= 10 for c in chunks)


class TestFindWordBoundary:
    def test_backward_finds_preceding_space(self):
        assert find_word_boundary("one two three", 9) == 7

    def test_backward_without_space_keeps_position(self):
        assert find_word_boundary("abcdefgh", 5) == 5

    def test_backward_respects_floor(self):
        assert find_word_boundary("ab cdefghij", 8, floor=3) == 8

    def test_forward_moves_past_next_space(self):
        assert find_word_boundary("one two three", 4, "forward") == 8

    def test_forward_without_space_returns_length(self):
        assert find_word_boundary("one two", 5, "forward") == 7

    def test_position_past_end(self):
        assert find_word_boundary("abc", 10) == 3
        assert find_word_boundary("abc", 3, "forward") == 3

    def test_unknown_direction(self):
        with pytest.raises(ValueError):
            find_word_boundary("a b", 1, "sideways")


class TestChunkDocument:
    def test_attaches_provenance_in_order(self):
        chunks = chunk_document("one two three four five", "numbers.txt", 10, 3)

        assert [c.content for c in chunks] == ["one two", "three four", "five"]
        assert [c.source.chunk_index for c in chunks] == [0, 1, 2]
        assert all(c.source.filename == "numbers.txt" for c in chunks)

    def test_empty_document(self):
        assert chunk_document("   ", "blank.md") == []

    def test_chunks_are_immutable(self):
        [chunk] = chunk_document("hello", "a.txt")

        with pytest.raises(Exception):
            chunk.content = "changed"
