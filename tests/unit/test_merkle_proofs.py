"""
Merkle Proof Unit Tests
Tests for core/merkle/merkle_proofs.py and core/merkle/proof.py

1. Every leaf of assorted trees verifies against the root
2. Tampering with the leaf, a sibling or a non-padding side flag fails verification
3. Malformed input yields False, never an exception
4. Binary and JSON proof forms
"""
import pytest

from core.crypto.hashing import Hasher, to_hex
from core.merkle.merkle_proofs import MerkleVerifier, compute_root_from_proof, verify
from core.merkle.merkle_tree import build
from core.merkle.proof import (
    STEP_SIZE,
    MerkleProof,
    ProofStep,
    Side,
    decode_proof,
    encode_proof,
    parse_digest,
)
from core.schemas.errors import InvalidDigestError, ProofFormatError

from fixtures.merkle_fixtures import flip_bit, make_leaves


class TestInclusion:
    """Honest proofs verify."""

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 8, 13])
    def test_all_indices_verify(self, n):
        leaves = make_leaves(n)
        tree = build(leaves)
        for i, leaf in enumerate(leaves):
            assert verify(leaf, tree.prove(i), tree.root)

    def test_proof_outlives_tree(self):
        leaves = make_leaves(4)
        tree = build(leaves)
        proof, trusted_root = tree.prove(3), tree.root
        del tree
        assert verify(leaves[3], proof, trusted_root)

    def test_plain_pairs_accepted(self, demo_leaves, demo_tree):
        pairs = list(demo_tree.prove(1))
        assert verify(demo_leaves[1], pairs, demo_tree.root)

    def test_string_sides_accepted(self, demo_leaves, demo_tree):
        pairs = [(sibling, side.value) for sibling, side in demo_tree.prove(1)]
        assert verify(demo_leaves[1], pairs, demo_tree.root)

    def test_padding_marker_does_not_affect_verification(self, demo_leaves, demo_tree):
        proof = demo_tree.prove(2)
        unmarked = MerkleProof(
            steps=tuple(ProofStep(s.sibling, s.side) for s in proof.steps)
        )
        assert verify(demo_leaves[2], unmarked, demo_tree.root)

    def test_memoryview_leaves_verify(self):
        """Leaf types accepted by build are accepted by verify."""
        values = [b"a", b"b", b"c"]
        tree = build([memoryview(v) for v in values])
        for i, value in enumerate(values):
            assert verify(memoryview(value), tree.prove(i), tree.root)
            assert verify(bytearray(value), tree.prove(i), memoryview(tree.root))

    def test_generator_of_pairs_accepted(self, demo_leaves, demo_tree):
        proof = demo_tree.prove(1)
        assert verify(demo_leaves[1], iter(proof), demo_tree.root)
        assert verify(demo_leaves[1], (step for step in proof.steps), demo_tree.root)

    def test_compute_root_from_proof(self, demo_leaves, demo_tree):
        assert compute_root_from_proof(demo_leaves[0], demo_tree.prove(0)) == demo_tree.root

    def test_matching_hasher_required(self):
        leaves = make_leaves(4)
        hasher = Hasher("sha3_256")
        tree = build(leaves, hasher=hasher)
        proof = tree.prove(2)

        assert verify(leaves[2], proof, tree.root, hasher=hasher)
        assert not verify(leaves[2], proof, tree.root)


class TestTamperDetection:
    """Any single change to the inputs is rejected."""

    @pytest.fixture
    def case(self):
        leaves = make_leaves(7)
        tree = build(leaves)
        return leaves, tree, tree.prove(4)

    def test_tampered_leaf_byte(self, case):
        leaves, tree, proof = case
        for position in range(len(leaves[4])):
            assert not verify(flip_bit(leaves[4], position), proof, tree.root)

    def test_tampered_sibling_byte(self, case):
        leaves, tree, proof = case
        for level, step in enumerate(proof.steps):
            for position in (0, 15, 31):
                steps = list(proof.steps)
                steps[level] = ProofStep(flip_bit(step.sibling, position), step.side)
                assert not verify(leaves[4], MerkleProof(steps=tuple(steps)), tree.root)

    def test_flipped_side(self, case):
        leaves, tree, proof = case
        for level, step in enumerate(proof.steps):
            steps = list(proof.steps)
            steps[level] = ProofStep(step.sibling, step.side.flipped())
            assert not verify(leaves[4], MerkleProof(steps=tuple(steps)), tree.root)

    def test_flipped_side_on_padding_step_still_verifies(self, demo_leaves, demo_tree):
        """H(0x01 || x || x) does not depend on the side flag."""
        proof = demo_tree.prove(2)
        first = proof.steps[0]
        assert first.is_padding

        flipped = MerkleProof(
            steps=(ProofStep(first.sibling, first.side.flipped(), is_padding=True),) + proof.steps[1:]
        )
        assert verify(demo_leaves[2], flipped, demo_tree.root)

    def test_flipped_side_every_index_of_odd_tree(self):
        leaves = make_leaves(7)
        tree = build(leaves)
        for i, leaf in enumerate(leaves):
            proof = tree.prove(i)
            for level, step in enumerate(proof.steps):
                steps = list(proof.steps)
                steps[level] = ProofStep(step.sibling, step.side.flipped(), step.is_padding)
                flipped = MerkleProof(steps=tuple(steps))
                if step.is_padding:
                    assert verify(leaf, flipped, tree.root)
                else:
                    assert not verify(leaf, flipped, tree.root), (i, level)

    def test_tampered_root(self, case):
        leaves, tree, proof = case
        assert not verify(leaves[4], proof, flip_bit(tree.root, 31, 7))

    def test_truncated_proof(self, case):
        leaves, tree, proof = case
        assert not verify(leaves[4], MerkleProof(steps=proof.steps[:-1]), tree.root)

    def test_extended_proof(self, case):
        leaves, tree, proof = case
        extra = ProofStep(tree.root, Side.RIGHT)
        assert not verify(leaves[4], MerkleProof(steps=proof.steps + (extra,)), tree.root)

    def test_proof_for_other_index(self, case):
        leaves, tree, _ = case
        assert not verify(leaves[4], tree.prove(5), tree.root)


class TestMalformedInput:
    """Verification returns False instead of raising."""

    def test_short_root(self, demo_leaves, demo_tree):
        assert verify(demo_leaves[0], demo_tree.prove(0), demo_tree.root[:31]) is False

    def test_root_not_bytes(self, demo_leaves, demo_tree):
        assert verify(demo_leaves[0], demo_tree.prove(0), to_hex(demo_tree.root)) is False

    def test_leaf_not_bytes(self, demo_tree):
        assert verify("leaf", demo_tree.prove(0), demo_tree.root) is False

    def test_short_sibling(self, demo_leaves, demo_tree):
        pairs = [(b"\x00" * 31, Side.RIGHT)]
        assert verify(demo_leaves[0], pairs, demo_tree.root) is False

    def test_unknown_side(self, demo_leaves, demo_tree):
        pairs = [(sibling, "up") for sibling, _ in demo_tree.prove(0)]
        assert verify(demo_leaves[0], pairs, demo_tree.root) is False

    def test_bad_step_shape(self, demo_leaves, demo_tree):
        assert verify(demo_leaves[0], [(b"\x00" * 32,)], demo_tree.root) is False

    def test_proof_not_a_sequence(self, demo_leaves, demo_tree):
        assert verify(demo_leaves[0], None, demo_tree.root) is False
        assert compute_root_from_proof(demo_leaves[0], 42) is None


class TestBinaryForm:
    """Tests for the 33-byte-per-step wire form."""

    def test_encoding_layout(self, demo_tree):
        proof = demo_tree.prove(1)
        data = encode_proof(proof)

        assert len(data) == STEP_SIZE * len(proof)
        assert data[0:1] == b"\x00"  # leaf 1 has its sibling on the left
        assert data[1:33] == proof.steps[0].sibling
        assert data[33:34] == b"\x01"

    def test_decode_recovers_steps(self, demo_leaves, demo_tree):
        proof = demo_tree.prove(2)
        decoded = decode_proof(encode_proof(proof))

        assert list(decoded) == list(proof)
        assert decoded.padding_steps == []
        assert verify(demo_leaves[2], decoded, demo_tree.root)

    def test_empty_proof_encodes_to_nothing(self):
        assert encode_proof(build([b"x"]).prove(0)) == b""
        assert len(decode_proof(b"")) == 0

    def test_bad_length_rejected(self):
        with pytest.raises(ProofFormatError, match="multiple of 33"):
            decode_proof(b"\x00" * 34)

    def test_unknown_flag_rejected(self):
        with pytest.raises(ProofFormatError, match="side flag"):
            decode_proof(b"\x02" + b"\x00" * 32)

    def test_verify_encoded(self, demo_leaves, demo_tree):
        data = encode_proof(demo_tree.prove(0))
        assert MerkleVerifier.verify_encoded(demo_leaves[0], data, demo_tree.root)
        assert not MerkleVerifier.verify_encoded(demo_leaves[0], data[:-1], demo_tree.root)
        assert not MerkleVerifier.verify_encoded(demo_leaves[0], "nope", demo_tree.root)


class TestJsonForm:
    """Tests for MerkleProof.to_dict / from_dict."""

    def test_to_dict(self, demo_tree):
        data = demo_tree.prove(2).to_dict()

        assert data["leaf_index"] == 2
        assert data["leaf_count"] == 3
        assert data["steps"][0] == {
            "sibling": to_hex(demo_tree.leaf_digest(2)),
            "side": "right",
            "is_padding": True,
        }

    def test_from_dict_round_trip_verifies(self, demo_leaves, demo_tree):
        restored = MerkleProof.from_dict(demo_tree.prove(2).to_dict())
        assert restored == demo_tree.prove(2)
        assert MerkleVerifier.verify_dict(demo_leaves[2], demo_tree.prove(2).to_dict(), demo_tree.root)

    def test_from_dict_requires_steps(self):
        with pytest.raises(ProofFormatError):
            MerkleProof.from_dict({"leaf_index": 0})

    def test_from_dict_rejects_bad_side(self):
        step = {"sibling": "0x" + "00" * 32, "side": "up"}
        with pytest.raises(ProofFormatError, match="invalid side"):
            MerkleProof.from_dict({"steps": [step]})

    def test_from_dict_rejects_short_sibling(self):
        step = {"sibling": "0x" + "00" * 31, "side": "left"}
        with pytest.raises(ProofFormatError) as exc_info:
            MerkleProof.from_dict({"steps": [step]})
        assert exc_info.value.details["field_path"] == "steps[0].sibling"

    @pytest.mark.parametrize("flag", ["false", 0, 1, None])
    def test_from_dict_rejects_non_boolean_padding(self, flag):
        step = {"sibling": "0x" + "00" * 32, "side": "left", "is_padding": flag}
        with pytest.raises(ProofFormatError, match="is_padding"):
            MerkleProof.from_dict({"steps": [step]})

    def test_from_dict_padding_defaults_false(self):
        step = {"sibling": "0x" + "00" * 32, "side": "left"}
        assert MerkleProof.from_dict({"steps": [step]}).steps[0].is_padding is False

    def test_from_dict_rejects_negative_index(self):
        with pytest.raises(ProofFormatError):
            MerkleProof.from_dict({"steps": [], "leaf_index": -1})

    def test_verify_dict_malformed_is_false(self, demo_leaves, demo_tree):
        assert MerkleVerifier.verify_dict(demo_leaves[0], {"steps": "x"}, demo_tree.root) is False


class TestParseDigest:
    """Tests for digest parsing."""

    def test_hex_and_bytes(self):
        digest = bytes(range(32))
        assert parse_digest(digest) == digest
        assert parse_digest(to_hex(digest)) == digest

    def test_wrong_length(self):
        with pytest.raises(InvalidDigestError) as exc_info:
            parse_digest(b"\x00" * 31, field_path="root")
        assert exc_info.value.details["field_path"] == "root"
        assert exc_info.value.details["actual"] == 31

    def test_bad_hex(self):
        with pytest.raises(InvalidDigestError):
            parse_digest("0x" + "zz" * 32)

    def test_wrong_type(self):
        with pytest.raises(InvalidDigestError):
            parse_digest(12345)

    def test_negative_leaf_index_rejected(self):
        with pytest.raises(ValueError):
            MerkleProof(steps=(), leaf_index=-1)
