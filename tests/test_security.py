"""
Password hashing tests.
"""

from quill.shared.utils.security import SecurityUtils


class TestSecurityUtils:
    def test_hash_and_verify(self):
        hashed = SecurityUtils.hash_password("correct-horse")

        assert hashed != "correct-horse"
        assert SecurityUtils.verify_password("correct-horse", hashed)
        assert not SecurityUtils.verify_password("wrong-horse", hashed)

    def test_hashes_are_salted(self):
        assert SecurityUtils.hash_password("same") != SecurityUtils.hash_password("same")
