"""Tests for the Fiat-Shamir transcript."""

from py_ecc.optimized_bn128 import G1

from primitives.field import BN254_SCALAR_PRIME
from primitives.transcript import Transcript


def _transcript(*scalars) -> Transcript:
    transcript = Transcript()
    transcript.put_bytes(b"vk")
    transcript.put_point(G1)
    transcript.put(list(scalars))
    return transcript


class TestTranscript:
    """Tests for absorb / squeeze behaviour."""

    def test_deterministic(self) -> None:
        """Same inputs give the same challenges."""
        assert _transcript(1, 2).get_field() == _transcript(1, 2).get_field()

    def test_input_sensitive(self) -> None:
        """Different inputs give different challenges."""
        assert _transcript(1, 2).get_field() != _transcript(1, 3).get_field()

    def test_order_sensitive(self) -> None:
        """Absorption order matters."""
        assert _transcript(1, 2).get_field() != _transcript(2, 1).get_field()

    def test_consecutive_challenges_differ(self) -> None:
        """Squeezing twice gives two different challenges."""
        transcript = _transcript(5)
        assert transcript.get_field() != transcript.get_field()

    def test_challenge_in_field(self) -> None:
        """Challenges are canonical field elements."""
        assert 0 <= int(_transcript(9).get_field()) < BN254_SCALAR_PRIME

    def test_bytes_are_length_prefixed(self) -> None:
        """Splitting the same bytes differently changes the state."""
        first = Transcript()
        first.put_bytes(b"ab")
        first.put_bytes(b"c")
        second = Transcript()
        second.put_bytes(b"a")
        second.put_bytes(b"bc")
        assert first.get_state() != second.get_state()
