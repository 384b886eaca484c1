import numpy
import pytest

from msaforge.core import alignment, moltype, seq_storage
from msaforge.core.errors import (
    InvalidArgumentError,
    LengthMismatchError,
    LongSequenceError,
    MissingSequenceError,
    OutOfRangeError,
    ShortSequenceError,
    UnknownSequenceError,
    UnsupportedAlphabetError,
)
from msaforge.core.partition import PartitionSet


@pytest.fixture
def dna_aln():
    return alignment.make_aligned_seqs(
        {"s1": "ACGT-A", "s2": "AC-TTA", "s3": "ACGTTA"}, moltype="dna"
    )


def _gappy_aln():
    # 10 rows, column j has the first k_j rows gapped
    gaps_per_col = [4, 5, 1, 5, 6, 1, 8]
    data = {}
    for i in range(10):
        data[f"s{i}"] = "".join("-" if i < k else "A" for k in gaps_per_col)
    return alignment.make_aligned_seqs(data, moltype="dna")


# construction and access
def test_make_aligned_seqs(dna_aln):
    assert dna_aln.names == ("s1", "s2", "s3")
    assert dna_aln.num_seqs == 3
    assert dna_aln.length == 6
    assert len(dna_aln) == 6
    assert dna_aln.moltype is moltype.DNA
    assert dna_aln.get_seq("s2") == "AC-TTA"


@pytest.mark.parametrize(
    "data",
    [
        [("a", "ACG"), ("b", "TTT")],
        [("a", "ACG", ""), ("b", "TTT", "")],
        {"a": "ACG", "b": b"TTT"},
    ],
)
def test_make_aligned_seqs_input_forms(data):
    aln = alignment.make_aligned_seqs(data, moltype="dna")
    assert aln.to_dict() == {"a": "ACG", "b": "TTT"}


def test_make_aligned_seqs_bare_seqs():
    aln = alignment.make_aligned_seqs(["ACG", "TTT"], moltype="dna")
    assert aln.names == ("seq_0", "seq_1")


@pytest.mark.parametrize(
    "data,expect",
    [
        ({"a": "ACGT"}, moltype.DNA),
        ({"a": "MKLE"}, moltype.PROTEIN),
        ({"a": "12@3"}, moltype.UNKNOWN),
    ],
)
def test_make_aligned_seqs_detects_moltype(data, expect):
    aln = alignment.make_aligned_seqs(data)
    assert aln.moltype is expect


def test_make_aligned_seqs_unequal():
    with pytest.raises(LengthMismatchError):
        alignment.make_aligned_seqs({"a": "ACG", "b": "AC"}, moltype="dna")


def test_empty_alignment():
    aln = alignment.Alignment()
    assert aln.length == -1
    assert len(aln) == 0
    assert aln.num_seqs == 0
    assert aln.array_seqs.shape == (0, 0)
    assert aln.moltype is moltype.UNKNOWN


def test_add_seq_length_mismatch(dna_aln):
    with pytest.raises(LengthMismatchError):
        dna_aln.add_seq("x", "AC")
    assert dna_aln.num_seqs == 3
    assert "x" not in dna_aln


def test_add_seq_duplicate_renamed(dna_aln):
    with pytest.warns(UserWarning):
        name = dna_aln.add_seq("s1", "AAAAAA")
    assert name == "s1_0001"
    assert dna_aln.get_seq("s1_0001") == "AAAAAA"
    assert dna_aln.get_seq("s1") == "ACGT-A"


def test_add_seq_ignore_identical():
    aln = alignment.Alignment("dna", ignore_identical=True)
    aln.add_seq("a", "ACG")
    with pytest.warns(UserWarning):
        got = aln.add_seq("a", "ACG")
    assert got is None
    assert aln.num_seqs == 1


def test_get_seq_unknown(dna_aln):
    with pytest.raises(UnknownSequenceError):
        dna_aln.get_seq("missing")


def test_get_record_is_copy(dna_aln):
    record = dna_aln.get_record("s1")
    record.seq[0] = ord("T")
    assert dna_aln.get_seq("s1") == "ACGT-A"


def test_iter_rows_comments():
    aln = alignment.make_aligned_seqs(
        [("a", "AC", "first"), ("b", "GT", "")], moltype="dna"
    )
    assert list(aln.iter_rows()) == [("a", "AC", "first"), ("b", "GT", "")]


def test_array_seqs(dna_aln):
    got = dna_aln.array_seqs
    assert got.shape == (3, 6)
    assert got.dtype == numpy.uint8
    # a copy
    got[:] = ord("N")
    assert dna_aln.get_seq("s1") == "ACGT-A"


def test_clone(dna_aln):
    dup = dna_aln.clone()
    dup.trim(2)
    assert dna_aln.length == 6
    assert dup.length == 4
    assert dup.moltype is dna_aln.moltype


def test_clear(dna_aln):
    dna_aln.clear()
    assert dna_aln.num_seqs == 0
    assert dna_aln.length == -1
    dna_aln.add_seq("a", "AC")
    assert dna_aln.length == 2


def test_update_from_array_shape(dna_aln):
    with pytest.raises(LengthMismatchError):
        dna_aln.update_from_array(numpy.zeros((2, 6), dtype=numpy.uint8))


def test_append(dna_aln):
    other = alignment.make_aligned_seqs({"s1": "TTTTTT", "x": "GGGGGG"}, moltype="dna")
    with pytest.warns(UserWarning):
        dna_aln.append(other)
    assert dna_aln.names == ("s1", "s2", "s3", "s1_0001", "x")


def test_append_length_mismatch(dna_aln):
    other = alignment.make_aligned_seqs({"x": "GG"}, moltype="dna")
    with pytest.raises(LengthMismatchError):
        dna_aln.append(other)
    assert dna_aln.num_seqs == 3


def test_repr(dna_aln):
    got = repr(dna_aln)
    assert got == (
        "3 x 6 nucleotide alignment: s1[ACGT-A], s2[AC-TTA], s3[ACGTTA]"
    )


def test_set_repr_policy(dna_aln):
    dna_aln.set_repr_policy(num_seqs=1, num_pos=3)
    assert repr(dna_aln) == "3 x 6 nucleotide alignment: s1[ACG...], ..."


def test_set_repr_policy_invalid(dna_aln):
    with pytest.raises(TypeError):
        dna_aln.set_repr_policy(num_seqs="2")


def test_repr_policy_environ(dna_aln, monkeypatch):
    monkeypatch.setenv("MSAFORGE_ALIGNMENT_REPR_POLICY", "num_seqs=2")
    assert repr(dna_aln) == "3 x 6 nucleotide alignment: s1[ACGT-A], s2[AC-TTA], ..."


# gap removal
def test_remove_gap_columns_all_gap_column():
    aln = alignment.make_aligned_seqs(
        {"a": "A-CG", "b": "A-CG", "c": "T-CA"}, moltype="dna"
    )
    got = aln.remove_gap_columns()
    assert got == (0, 0)
    assert aln.to_dict() == {"a": "ACG", "b": "ACG", "c": "TCA"}
    assert aln.length == 3


def test_remove_gap_columns_cutoff():
    aln = _gappy_aln()
    aln.remove_gap_columns(cutoff=0.3)
    # columns with >= 3 gaps are removed
    assert aln.length == 2
    assert aln.get_seq("s0") == "--"
    assert aln.get_seq("s9") == "AA"


def test_remove_gap_columns_cutoff_only_ends():
    aln = _gappy_aln()
    got = aln.remove_gap_columns(cutoff=0.3, only_ends=True)
    assert got == (2, 1)
    # columns 0, 1 and 6 are removed
    assert aln.length == 4
    assert aln.get_seq("s4") == "A--A"
    assert aln.get_seq("s0") == "----"


def test_remove_gap_columns_only_ends():
    aln = alignment.make_aligned_seqs({"a": "-A-A-", "b": "AAAAA"}, moltype="dna")
    got = aln.remove_gap_columns(only_ends=True)
    assert got == (1, 1)
    assert aln.to_dict() == {"a": "A-A", "b": "AAA"}


def test_remove_gap_columns_all_removable():
    aln = alignment.make_aligned_seqs({"a": "-A", "b": "A-"}, moltype="dna")
    got = aln.remove_gap_columns()
    assert got == (2, 2)
    assert aln.length == 0
    assert aln.num_seqs == 2


@pytest.mark.parametrize("cutoff", [-0.5, 1.5])
def test_remove_gap_columns_invalid_cutoff(cutoff):
    aln = alignment.make_aligned_seqs({"a": "A-C", "b": "AAC"}, moltype="dna")
    aln.remove_gap_columns(cutoff=cutoff)
    # treated as 0
    assert aln.to_dict() == {"a": "AC", "b": "AC"}


def test_remove_gap_columns_empty():
    aln = alignment.Alignment("dna")
    assert aln.remove_gap_columns() == (0, 0)


@pytest.mark.parametrize(
    "cutoff,expect",
    [(0, (["a", "c"], ("b",))), (0.5, (["c"], ("a", "b")))],
)
def test_remove_gap_rows(cutoff, expect):
    aln = alignment.make_aligned_seqs(
        {"a": "AC-T", "b": "ACGT", "c": "--G-"}, moltype="dna"
    )
    got = aln.remove_gap_rows(cutoff=cutoff)
    assert (got, aln.names) == expect
    assert aln.length == 4


def test_remove_gap_rows_all():
    aln = alignment.make_aligned_seqs({"a": "A-", "b": "-C"}, moltype="dna")
    assert aln.remove_gap_rows() == ["a", "b"]
    assert aln.num_seqs == 0
    assert aln.length == -1


# trimming and masking
@pytest.mark.parametrize("from_start,expect", [(True, "GT-A"), (False, "ACGT")])
def test_trim(dna_aln, from_start, expect):
    dna_aln.trim(2, from_start=from_start)
    assert dna_aln.get_seq("s1") == expect
    assert dna_aln.length == 4


@pytest.mark.parametrize("size", [-1, 6, 7])
def test_trim_invalid(dna_aln, size):
    with pytest.raises(InvalidArgumentError):
        dna_aln.trim(size)
    assert dna_aln.length == 6


def test_mask(dna_aln):
    dna_aln.mask(1, 2)
    assert dna_aln.get_seq("s1") == "ANNT-A"
    assert dna_aln.get_seq("s2") == "ANNTTA"


def test_mask_clipped(dna_aln):
    dna_aln.mask(4, 10)
    assert dna_aln.get_seq("s1") == "ACGTNN"


def test_mask_protein():
    aln = alignment.make_aligned_seqs({"a": "MKLV"}, moltype="protein")
    aln.mask(0, 2)
    assert aln.get_seq("a") == "XXLV"


@pytest.mark.parametrize("start", [-1, 7])
def test_mask_invalid_start(dna_aln, start):
    with pytest.raises(InvalidArgumentError):
        dna_aln.mask(start, 1)


def test_mask_unknown_moltype():
    aln = alignment.make_aligned_seqs({"a": "AC"}, moltype="unknown")
    with pytest.raises(UnsupportedAlphabetError):
        aln.mask(0, 1)
    assert aln.get_seq("a") == "AC"


# sub-alignments
def test_sub_align(dna_aln):
    got = dna_aln.sub_align(1, 3)
    assert got.to_dict() == {"s1": "CGT", "s2": "C-T", "s3": "CGT"}
    assert got.length == 3
    # original unchanged
    assert dna_aln.length == 6


def test_sub_align_zero_length(dna_aln):
    got = dna_aln.sub_align(6, 0)
    assert got.length == 0
    assert got.num_seqs == 3


@pytest.mark.parametrize(
    "start,length,err",
    [
        (7, 0, OutOfRangeError),
        (-1, 2, OutOfRangeError),
        (2, -1, InvalidArgumentError),
        (4, 3, OutOfRangeError),
    ],
)
def test_sub_align_invalid(dna_aln, start, length, err):
    with pytest.raises(err):
        dna_aln.sub_align(start, length)


def test_random_sub_align(dna_aln, scripted):
    rng = scripted(ints=[2])
    got = dna_aln.random_sub_align(3, rng=rng)
    assert got.get_seq("s1") == "GT-"
    assert rng.exhausted


@pytest.mark.parametrize("length", [0, 7])
def test_random_sub_align_invalid(dna_aln, length, scripted):
    with pytest.raises(InvalidArgumentError):
        dna_aln.random_sub_align(length, rng=scripted())


def test_random_sub_align_seeded(dna_aln):
    first = dna_aln.random_sub_align(4, rng=11)
    second = dna_aln.random_sub_align(4, rng=11)
    assert first.to_dict() == second.to_dict()
    assert first.length == 4


def test_take_positions(dna_aln):
    got = dna_aln.take_positions([5, 0, 0])
    assert got.get_seq("s1") == "AAA"


@pytest.mark.parametrize("cols", [[6], [-1, 0]])
def test_take_positions_invalid(dna_aln, cols):
    with pytest.raises(OutOfRangeError):
        dna_aln.take_positions(cols)


# character replacement
def test_replace(dna_aln):
    dna_aln.replace("T", "U")
    assert dna_aln.get_seq("s2") == "AC-UUA"


def test_replace_regex(dna_aln):
    dna_aln.replace("[AG]", "R", regex=True)
    assert dna_aln.get_seq("s1") == "RCRT-R"


def test_replace_length_change(dna_aln):
    with pytest.raises(LengthMismatchError):
        dna_aln.replace("-", "")
    assert dna_aln.get_seq("s1") == "ACGT-A"


def test_replace_invalid_regex(dna_aln):
    with pytest.raises(InvalidArgumentError):
        dna_aln.replace("[", "A", regex=True)


def test_replace_match_chars():
    aln = alignment.make_aligned_seqs(
        {"r": "AC.T", "x": "..GT", "y": "...."}, moltype="dna"
    )
    aln.replace_match_chars()
    assert aln.to_dict() == {"r": "AC.T", "x": "ACGT", "y": "AC.T"}


def test_diff_with_first():
    aln = alignment.make_aligned_seqs(
        {"r": "ACGT", "x": "ACTT", "y": "TCGA"}, moltype="dna"
    )
    aln.diff_with_first()
    assert aln.to_dict() == {"r": "ACGT", "x": "..T.", "y": "T..A"}
    # and back again
    aln.replace_match_chars()
    assert aln.to_dict() == {"r": "ACGT", "x": "ACTT", "y": "TCGA"}


def test_count_differences():
    aln = alignment.make_aligned_seqs(
        {"r": "ACGT", "x": "ACTT", "y": "TCGA"}, moltype="dna"
    )
    all_diffs, diffs = aln.count_differences()
    assert all_diffs == ["GT", "AT", "TA"]
    assert diffs == [{"GT": 1}, {"AT": 1, "TA": 1}]


def test_count_differences_single_row():
    aln = alignment.make_aligned_seqs({"r": "ACGT"}, moltype="dna")
    assert aln.count_differences() == ([], [])


# translation
def test_translate():
    aln = alignment.make_aligned_seqs(
        {"a": "ATGAAA---TAA", "b": "ATGAA-GGGTAG"}, moltype="dna"
    )
    aln.translate()
    assert aln.moltype is moltype.PROTEIN
    assert aln.to_dict() == {"a": "MK-*", "b": "MXG*"}
    assert aln.length == 4


def test_translate_phase():
    aln = alignment.make_aligned_seqs({"a": "ATGAAA---TAA"}, moltype="dna")
    aln.translate(phase=1)
    assert aln.get_seq("a") == "*XX"


def test_translate_code():
    aln = alignment.make_aligned_seqs({"a": "TGAAGA"}, moltype="dna")
    aln.translate(code=2)
    assert aln.get_seq("a") == "W*"


def test_translate_invalid(dna_aln):
    with pytest.raises(InvalidArgumentError):
        dna_aln.translate(phase=3)
    protein = alignment.make_aligned_seqs({"a": "MK"}, moltype="protein")
    with pytest.raises(UnsupportedAlphabetError):
        protein.translate()


# pattern compression
def test_compress():
    aln = alignment.make_aligned_seqs({"a": "AAGAC", "b": "TTCTT"}, moltype="dna")
    weights = aln.compress()
    assert weights == [3, 1, 1]
    assert aln.to_dict() == {"a": "AGC", "b": "TCT"}


def test_compress_preserves_column_multiset():
    aln = alignment.random_alignment("dna", 50, 3, rng=3)
    orig = sorted(col.tobytes() for col in aln.array_seqs.T)
    compressed = aln.clone()
    weights = compressed.compress()
    assert sum(weights) == 50
    data = compressed.array_seqs
    expanded = []
    for col, weight in zip(data.T, weights):
        expanded.extend([col.tobytes()] * weight)
    assert sorted(expanded) == orig
    # patterns are distinct
    assert len({col.tobytes() for col in data.T}) == len(weights)


def test_compress_empty():
    assert alignment.Alignment("dna").compress() == []


# coordinates
@pytest.mark.parametrize(
    "start,length,expect", [(1, 2, (3, 2)), (3, 2, (5, 3)), (0, 1, (0, 1)), (0, 5, (0, 8))]
)
def test_ref_coordinates(start, length, expect):
    aln = alignment.make_aligned_seqs(
        {"r": "A--CGT-A", "o": "AAAAAAAA"}, moltype="dna"
    )
    assert aln.ref_coordinates("r", start, length) == expect


def test_ref_coordinates_gapless_identity():
    aln = alignment.make_aligned_seqs(
        {"r": "A--CGT-A", "o": "AAAAAAAA"}, moltype="dna"
    )
    for k in range(8):
        assert aln.ref_coordinates("o", k, 1) == (k, 1)


@pytest.mark.parametrize(
    "name,start,length,err",
    [
        ("missing", 0, 1, UnknownSequenceError),
        ("r", -1, 1, InvalidArgumentError),
        ("r", 0, 0, InvalidArgumentError),
        ("r", 4, 2, OutOfRangeError),
    ],
)
def test_ref_coordinates_invalid(name, start, length, err):
    aln = alignment.make_aligned_seqs({"r": "A--CGT-A"}, moltype="dna")
    with pytest.raises(err):
        aln.ref_coordinates(name, start, length)


# set operations
def test_concat():
    first = alignment.make_aligned_seqs({"x": "AC", "y": "GT"}, moltype="dna")
    second = alignment.make_aligned_seqs({"y": "TT", "z": "GG"}, moltype="dna")
    first.concat(second)
    assert first.to_dict() == {"x": "AC--", "y": "GTTT", "z": "--GG"}
    assert first.length == 4


def test_concat_disjoint_names():
    first = alignment.make_aligned_seqs({"a": "ACG", "b": "TTT"}, moltype="dna")
    second = alignment.make_aligned_seqs({"c": "GG", "d": "CC", "e": "AA"}, moltype="dna")
    first.concat(second)
    assert first.num_seqs == 5
    assert first.length == 5
    assert first.get_seq("a") == "ACG--"
    assert first.get_seq("e") == "---AA"


def test_concat_into_empty():
    first = alignment.Alignment("dna")
    second = alignment.make_aligned_seqs({"c": "GG"}, moltype="dna")
    first.concat(second)
    assert first.to_dict() == {"c": "GG"}


def test_concat_moltype_mismatch(dna_aln):
    protein = alignment.make_aligned_seqs({"s1": "MK"}, moltype="protein")
    with pytest.raises(UnsupportedAlphabetError):
        dna_aln.concat(protein)
    assert dna_aln.length == 6


def test_split(dna_aln):
    parts = PartitionSet(6)
    parts.add_range("first", 0, 2)
    parts.add_range("second", 3, 5)
    got = dna_aln.split(parts)
    assert len(got) == 2
    assert got[0].to_dict() == {"s1": "ACG", "s2": "AC-", "s3": "ACG"}
    assert got[1].to_dict() == {"s1": "T-A", "s2": "TTA", "s3": "TTA"}


def test_split_codon_positions(dna_aln):
    parts = PartitionSet(6)
    parts.add_range("12", 0, 5, modulo=3)
    parts.add_range("12", 1, 5, modulo=3)
    parts.add_range("3", 2, 5, modulo=3)
    first, third = dna_aln.split(parts)
    assert first.get_seq("s1") == "ACT-"
    assert third.get_seq("s1") == "GA"


def test_split_invalid(dna_aln):
    single = PartitionSet(6)
    single.add_range("all", 0, 5)
    with pytest.raises(InvalidArgumentError):
        dna_aln.split(single)
    wrong_length = PartitionSet(4)
    wrong_length.add_range("a", 0, 1)
    wrong_length.add_range("b", 2, 3)
    with pytest.raises(InvalidArgumentError):
        dna_aln.split(wrong_length)


def test_codon_align():
    aa = alignment.make_aligned_seqs({"s": "M-K"}, moltype="protein")
    nt = alignment.make_unaligned_seqs({"s": "ATGAAG"}, moltype="dna")
    got = aa.codon_align(nt)
    assert got.get_seq("s") == "ATG---AAG"
    assert got.moltype is moltype.DNA
    assert got.length == 9


def test_codon_align_drops_trailing():
    aa = alignment.make_aligned_seqs({"s": "M-K"}, moltype="protein")
    nt = alignment.make_unaligned_seqs({"s": "ATGAAGC"}, moltype="dna")
    with pytest.warns(UserWarning, match="dropping 1"):
        got = aa.codon_align(nt)
    assert got.get_seq("s") == "ATG---AAG"


@pytest.mark.parametrize(
    "nt,err",
    [
        ({"other": "ATGAAG"}, MissingSequenceError),
        ({"s": "ATGAA"}, ShortSequenceError),
        ({"s": "ATGAAGCCC"}, LongSequenceError),
    ],
)
def test_codon_align_invalid(nt, err):
    aa = alignment.make_aligned_seqs({"s": "M-K"}, moltype="protein")
    nt = alignment.make_unaligned_seqs(nt, moltype="dna")
    with pytest.raises(err):
        aa.codon_align(nt)


def test_codon_align_not_protein(dna_aln):
    nt = alignment.make_unaligned_seqs({"s1": "ATG"}, moltype="dna")
    with pytest.raises(UnsupportedAlphabetError):
        dna_aln.codon_align(nt)


# resampling
def test_build_bootstrap(dna_aln, scripted):
    boot, indices = dna_aln.build_bootstrap(
        rng=scripted(ints=[2, 2, 0, 1, 5, 4]), with_indices=True
    )
    assert indices == [2, 2, 0, 1, 5, 4]
    assert boot.get_seq("s1") == "GGACA-"


def test_build_bootstrap_traces_back(dna_aln):
    boot, indices = dna_aln.build_bootstrap(rng=5, with_indices=True)
    assert boot.num_seqs == dna_aln.num_seqs
    assert boot.length == dna_aln.length
    src = dna_aln.array_seqs
    numpy.testing.assert_equal(boot.array_seqs, src[:, indices])


def test_build_bootstrap_no_indices(dna_aln):
    boot = dna_aln.build_bootstrap(rng=5)
    assert isinstance(boot, alignment.Alignment)


def test_sample(dna_aln, scripted):
    got = dna_aln.sample(2, rng=scripted(perms=[[2, 0, 1]]))
    assert got.names == ("s1", "s3")
    assert got.length == 6


def test_sample_rows_not_indexed_one_at_a_time(dna_aln, monkeypatch):
    def by_position(self, index):
        msg = "rows must not be looked up by position"
        raise AssertionError(msg)

    monkeypatch.setattr(seq_storage.SeqsData, "__getitem__", by_position)
    got = dna_aln.sample(3, rng=1)
    assert got.names == ("s1", "s2", "s3")
    got = dna_aln.rarefy(2, {"s1": 1, "s3": 1}, rng=1)
    assert got.names == ("s1", "s3")


@pytest.mark.parametrize("n", [0, 4])
def test_sample_invalid(dna_aln, n):
    with pytest.raises(InvalidArgumentError):
        dna_aln.sample(n)


def test_rarefy(dna_aln, scripted):
    counts = {"s1": 1, "s2": 0, "s3": 3}
    got = dna_aln.rarefy(2, counts, rng=scripted(perms=[[3, 0, 1, 2]]))
    assert got.names == ("s1", "s3")


@pytest.mark.parametrize(
    "n,counts,err",
    [
        (1, {"missing": 1}, UnknownSequenceError),
        (1, {"s1": -1}, InvalidArgumentError),
        (0, {"s1": 2}, InvalidArgumentError),
        (3, {"s1": 2}, InvalidArgumentError),
    ],
)
def test_rarefy_invalid(dna_aln, n, counts, err):
    with pytest.raises(err):
        dna_aln.rarefy(n, counts)


# statistics wrappers
def test_char_stats(dna_aln):
    got = dna_aln.char_stats()
    assert got == {"A": 6, "C": 3, "G": 2, "T": 5, "-": 2}


def test_unique_chars(dna_aln):
    assert dna_aln.unique_chars() == "-ACGT"


def test_consensus():
    aln = alignment.make_aligned_seqs(
        {"a": "AC-T", "b": "AG-T", "c": "TG-A"}, moltype="dna"
    )
    got = aln.consensus()
    assert got.names == ("consensus",)
    assert got.get_seq("consensus") == "AG-T"
    assert got.moltype is moltype.DNA


# module functions
def test_random_alignment():
    aln = alignment.random_alignment("dna", 20, 4, rng=1)
    assert aln.names == ("Seq0000", "Seq0001", "Seq0002", "Seq0003")
    assert aln.length == 20
    assert set(aln.unique_chars()) <= set("ACGT")
    again = alignment.random_alignment("dna", 20, 4, rng=1)
    assert aln.to_dict() == again.to_dict()


def test_random_alignment_protein():
    aln = alignment.random_alignment("protein", 30, 2, rng=1)
    assert set(aln.unique_chars()) <= set(moltype.STD_AMINO_ACIDS)


def test_random_alignment_invalid():
    with pytest.raises(UnsupportedAlphabetError):
        alignment.random_alignment("unknown", 5, 2, rng=1)
    with pytest.raises(InvalidArgumentError):
        alignment.random_alignment("dna", -1, 2, rng=1)


# unaligned collections
def test_sequence_collection():
    seqs = alignment.make_unaligned_seqs({"a": "ACGT", "b": "AC"}, moltype="dna")
    assert seqs.num_seqs == 2
    assert len(seqs) == 2
    assert seqs.seq_lengths() == {"a": 4, "b": 2}
    assert "b" in seqs
    assert repr(seqs) == "2x nucleotide seqcollection: (a[ACGT], b[AC])"


def test_sequence_collection_to_alignment():
    seqs = alignment.make_unaligned_seqs({"a": "ACGT", "b": "AC"}, moltype="dna")
    with pytest.raises(LengthMismatchError):
        seqs.to_alignment()
    seqs.replace("GT", "")
    aln = seqs.to_alignment()
    assert aln.length == 2
    assert aln.names == ("a", "b")


def test_sequence_collection_translate_all_phases():
    seqs = alignment.make_unaligned_seqs({"s": "ATGAAATAG"}, moltype="dna")
    seqs.translate(phase=-1)
    assert seqs.to_dict() == {"s_0": "MK*", "s_1": "*N", "s_2": "EI"}
    assert seqs.moltype is moltype.PROTEIN


def test_sequence_collection_translate_invalid():
    seqs = alignment.make_unaligned_seqs({"s": "ATG"}, moltype="dna")
    with pytest.raises(InvalidArgumentError):
        seqs.translate(phase=-2)


def test_sequence_collection_sample(scripted):
    seqs = alignment.make_unaligned_seqs(
        {"a": "A", "b": "CC", "c": "GGG"}, moltype="dna"
    )
    got = seqs.sample(2, rng=scripted(perms=[[2, 1, 0]]))
    assert got.names == ("b", "c")


def test_sequence_collection_clone():
    seqs = alignment.make_unaligned_seqs({"a": "AC"}, moltype="dna")
    dup = seqs.clone()
    dup.add_seq("b", "G")
    assert seqs.num_seqs == 1
