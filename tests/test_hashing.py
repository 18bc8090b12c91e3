"""Unit tests for hashing utilities."""

from internmatch.utils.hashing import compute_model_fingerprint, hash_string, new_application_id


class TestHashString:
    """Tests for hash_string."""

    def test_sha256_default(self):
        """Test default algorithm produces a 64-character hex digest."""
        digest = hash_string("internship")
        assert len(digest) == 64
        assert all(c in "0123456789abcdef" for c in digest)

    def test_deterministic(self):
        """Test the same input always hashes the same way."""
        assert hash_string("abc") == hash_string("abc")
        assert hash_string("abc") != hash_string("abd")

    def test_other_algorithm(self):
        """Test a different hashlib algorithm can be selected."""
        assert len(hash_string("abc", algorithm="md5")) == 32


class TestComputeModelFingerprint:
    """Tests for compute_model_fingerprint."""

    def test_key_order_does_not_matter(self):
        """Test dict ordering does not change the fingerprint."""
        a = compute_model_fingerprint({"version": "1", "weights": {"a": 1, "b": 2}})
        b = compute_model_fingerprint({"weights": {"b": 2, "a": 1}, "version": "1"})
        assert a == b

    def test_value_change_changes_fingerprint(self):
        """Test that changing a weight changes the fingerprint."""
        a = compute_model_fingerprint({"version": "1", "weights": {"a": 1}})
        b = compute_model_fingerprint({"version": "1", "weights": {"a": 2}})
        assert a != b

    def test_version_is_part_of_fingerprint(self):
        """Test that the version alone distinguishes two payloads."""
        a = compute_model_fingerprint({"version": "1", "weights": {"a": 1}})
        b = compute_model_fingerprint({"version": "2", "weights": {"a": 1}})
        assert a != b


def test_new_application_id_is_unique():
    """Test generated application ids are unique hex strings."""
    ids = {new_application_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(len(value) == 32 for value in ids)
