"""
Tests for SHA-256 signature verification and PEM repair.
"""

from auth.signature import PEM_FOOTER, PEM_HEADER, SignatureVerifier, repair_pem


def _flatten(pem: str) -> str:
    return pem.replace("\n", "")


class TestRepairPem:
    def test_multiline_key_passes_through(self, rsa_public_pem):
        assert repair_pem(rsa_public_pem) is rsa_public_pem

    def test_flattened_key_is_rewrapped(self, rsa_public_pem):
        repaired = repair_pem(_flatten(rsa_public_pem))
        lines = repaired.strip().split("\n")
        assert lines[0] == PEM_HEADER
        assert lines[-1] == PEM_FOOTER
        body = lines[1:-1]
        assert all(len(line) == 64 for line in body[:-1])
        assert 0 < len(body[-1]) <= 64
        assert repaired == rsa_public_pem

    def test_body_without_markers_gets_them(self):
        repaired = repair_pem("A" * 100)
        assert repaired.split("\n")[:3] == [PEM_HEADER, "A" * 64, "A" * 36]

    def test_single_newline_disables_repair(self):
        odd = PEM_HEADER + "abc\n" + PEM_FOOTER
        assert repair_pem(odd) == odd


class TestSignatureVerifier:
    def setup_method(self):
        self.verifier = SignatureVerifier()

    def test_rsa_valid_signature(self, rsa_private_key, rsa_public_pem, sign):
        sig = sign(rsa_private_key, "hello world")
        assert self.verifier.verify(rsa_public_pem, "hello world", sig) is True

    def test_ec_valid_signature(self, ec_private_key, ec_public_pem, sign):
        sig = sign(ec_private_key, "hello world")
        assert self.verifier.verify(ec_public_pem, "hello world", sig) is True

    def test_altered_byte_fails(self, rsa_private_key, rsa_public_pem, sign):
        sig = sign(rsa_private_key, "hello world")
        assert self.verifier.verify(rsa_public_pem, "hello worle", sig) is False

    def test_whitespace_in_message_matters(self, rsa_private_key, rsa_public_pem, sign):
        sig = sign(rsa_private_key, " hello world ")
        assert self.verifier.verify(rsa_public_pem, " hello world ", sig) is True
        assert self.verifier.verify(rsa_public_pem, "hello world", sig) is False

    def test_flattened_key_matches_multiline_key(self, rsa_private_key, rsa_public_pem, sign):
        good = sign(rsa_private_key, "msg")
        flat = _flatten(rsa_public_pem)
        assert self.verifier.verify(flat, "msg", good) is True
        assert self.verifier.verify(flat, "other", good) is False

    def test_wrong_key_fails(self, ec_public_pem, rsa_private_key, sign):
        sig = sign(rsa_private_key, "msg")
        assert self.verifier.verify(ec_public_pem, "msg", sig) is False

    def test_malformed_inputs_return_false(self, rsa_public_pem):
        assert self.verifier.verify(rsa_public_pem, "msg", "zz-not-hex") is False
        assert self.verifier.verify(rsa_public_pem, "msg", "") is False
        assert self.verifier.verify("not a key", "msg", "abcd") is False
        assert self.verifier.verify(PEM_HEADER + "!!!!" + PEM_FOOTER, "msg", "abcd") is False
