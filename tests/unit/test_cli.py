"""
CLI Tests

Drive `ccmp_cli.main.main(argv)` end to end against files in tmp_path and
check output and exit codes (0 success, 1 error, 2 not verified).
"""

import json

import pytest

from ccmp_cli.commands.demo import DEMO_LEAVES, run_demo
from ccmp_cli.leaves import LeafFileError, load_leaves
from ccmp_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)
from core.crypto.hashing import to_hex
from core.merkle.merkle_tree import build


LEAVES_HEX = ["0x" + "00" * 32, "0x" + "01" * 32, "0x" + "02" * 32]


@pytest.fixture
def leaves_file(isolated_env):
    path = isolated_env / "leaves.json"
    path.write_text(json.dumps(LEAVES_HEX))
    return path


@pytest.fixture
def expected_root():
    return to_hex(build(DEMO_LEAVES).root)


class TestLeafLoading:
    """Tests for leaf file formats."""

    def test_json_list(self, leaves_file):
        assert load_leaves(leaves_file) == DEMO_LEAVES

    def test_json_object_with_encoding(self, isolated_env):
        path = isolated_env / "leaves.json"
        path.write_text(json.dumps({"encoding": "utf8", "leaves": ["a", "b"]}))
        assert load_leaves(path) == [b"a", b"b"]

    def test_lines_skip_blanks(self, isolated_env):
        path = isolated_env / "leaves.txt"
        path.write_text("0x00\n\n0x01\n")
        assert load_leaves(path) == [b"\x00", b"\x01"]

    def test_lines_utf8(self, isolated_env):
        path = isolated_env / "leaves.txt"
        path.write_text("alpha\nbeta\n")
        assert load_leaves(path, encoding="utf8") == [b"alpha", b"beta"]

    def test_missing_file(self, isolated_env):
        with pytest.raises(LeafFileError, match="not found"):
            load_leaves(isolated_env / "absent.json")

    def test_bad_hex(self, isolated_env):
        path = isolated_env / "leaves.txt"
        path.write_text("nothex\n")
        with pytest.raises(LeafFileError):
            load_leaves(path)


class TestBuildCommand:
    def test_build_json(self, leaves_file, expected_root, capsys):
        code = main(["build", str(leaves_file), "--json"])
        data = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert data["root"] == expected_root
        assert data["leaf_count"] == 3
        assert data["padded_levels"] == [0]

    def test_build_human(self, leaves_file, expected_root, capsys):
        assert main(["build", str(leaves_file)]) == EXIT_SUCCESS
        assert f"root: {expected_root}" in capsys.readouterr().out

    def test_build_empty(self, isolated_env, capsys):
        path = isolated_env / "empty.json"
        path.write_text("[]")
        assert main(["build", str(path)]) == EXIT_RUNTIME_ERROR
        assert "empty" in capsys.readouterr().err


class TestProveAndVerify:
    """prove writes a proof file that verify accepts."""

    def test_prove_then_verify_json(self, leaves_file, expected_root, isolated_env, capsys):
        proof_path = isolated_env / "proof.json"
        assert main(["prove", str(leaves_file), "--index", "0", "--out", str(proof_path)]) == EXIT_SUCCESS

        document = json.loads(proof_path.read_text())
        assert document["root"] == expected_root
        assert len(document["steps"]) == 2

        code = main([
            "verify", "--leaf", LEAVES_HEX[0],
            "--proof", str(proof_path), "--root", expected_root, "--json",
        ])
        out = capsys.readouterr().out
        assert code == EXIT_SUCCESS
        assert json.loads(out[out.index("{"):])["verified"] is True

    def test_prove_then_verify_binary(self, leaves_file, expected_root, isolated_env):
        proof_path = isolated_env / "proof.bin"
        assert main(["prove", str(leaves_file), "-i", "2", "-o", str(proof_path)]) == EXIT_SUCCESS
        assert len(proof_path.read_bytes()) == 66

        code = main(["verify", "--leaf", LEAVES_HEX[2], "--proof", str(proof_path), "--root", expected_root])
        assert code == EXIT_SUCCESS

    def test_wrong_leaf_exit_code(self, leaves_file, expected_root, isolated_env, capsys):
        proof_path = isolated_env / "proof.json"
        main(["prove", str(leaves_file), "--index", "0", "--out", str(proof_path)])

        code = main(["verify", "--leaf", LEAVES_HEX[1], "--proof", str(proof_path), "--root", expected_root])
        assert code == EXIT_VERIFICATION_FAILED
        assert "verified: false" in capsys.readouterr().out

    def test_leaf_text(self, isolated_env):
        leaves = isolated_env / "words.txt"
        leaves.write_text("alpha\nbeta\ngamma\n")
        proof_path = isolated_env / "proof.json"
        main(["prove", str(leaves), "--encoding", "utf8", "--index", "1", "--out", str(proof_path)])
        root = json.loads(proof_path.read_text())["root"]

        code = main(["verify", "--leaf-text", "beta", "--proof", str(proof_path), "--root", root])
        assert code == EXIT_SUCCESS

    def test_prove_stdout(self, leaves_file, capsys):
        assert main(["prove", str(leaves_file), "--index", "1"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["leaf_index"] == 1

    def test_prove_index_out_of_range(self, leaves_file, capsys):
        assert main(["prove", str(leaves_file), "--index", "3"]) == EXIT_RUNTIME_ERROR
        assert "out of range" in capsys.readouterr().err

    def test_malformed_proof_file_not_verified(self, isolated_env, expected_root):
        proof_path = isolated_env / "proof.json"
        proof_path.write_text("{not json")
        code = main(["verify", "--leaf", LEAVES_HEX[0], "--proof", str(proof_path), "--root", expected_root])
        assert code == EXIT_VERIFICATION_FAILED

    def test_bad_root(self, isolated_env, capsys):
        proof_path = isolated_env / "proof.json"
        proof_path.write_text('{"steps": []}')
        code = main(["verify", "--leaf", "0x00", "--proof", str(proof_path), "--root", "0x1234"])
        assert code == EXIT_RUNTIME_ERROR
        assert "32 bytes" in capsys.readouterr().err

    def test_missing_proof_file(self, isolated_env, expected_root):
        code = main(["verify", "--leaf", "0x00", "--proof", str(isolated_env / "x.json"), "--root", expected_root])
        assert code == EXIT_RUNTIME_ERROR


class TestDemoCommand:
    def test_run_demo(self):
        report = run_demo()
        assert report["receipt"]["verified"] is True
        assert report["forged_receipt"]["verified"] is False
        assert report["receipt"]["proof_length"] == 2

    def test_demo_cli(self, isolated_env, expected_root, capsys):
        assert main(["demo"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert f"Merkle root hash: {expected_root}" in out
        assert "verified: true" in out


class TestConfigCommand:
    def test_init_and_show(self, isolated_env, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (isolated_env / "merkle.json").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

        capsys.readouterr()
        assert main(["config", "--show"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["hash_algorithm"] == "sha256"


class TestParser:
    def test_no_command(self, isolated_env, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_verify_requires_one_leaf_form(self):
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["verify", "--leaf", "0x00", "--leaf-text", "a", "--proof", "p", "--root", "r"])
