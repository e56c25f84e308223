import pytest

from alphabet_and_permutation import Alphabet, Permutation
from errors import InvalidCharacter, InvalidConfiguration
from rotor_and_reflector import Rotor, RotorKind

ALPHA = Alphabet("ABCD")


def _moving(notches="", cycles="(ACB)"):
    return Rotor.moving("X", Permutation(cycles, ALPHA), notches)


def test_kinds_and_capabilities():
    perm = Permutation("(AB) (CD)", ALPHA)
    refl = Rotor.reflector("R", perm)
    fixed = Rotor.fixed("F", perm)
    moving = Rotor.moving("M", perm, "A")

    assert refl.kind is RotorKind.REFLECTOR and refl.reflecting and not refl.rotates
    assert fixed.kind is RotorKind.FIXED and not fixed.reflecting and not fixed.rotates
    assert moving.kind is RotorKind.MOVING and moving.rotates and not moving.reflecting
    assert refl.size() == fixed.size() == moving.size() == 4


def test_non_moving_rotors_never_advance_or_notch():
    perm = Permutation("(AB) (CD)", ALPHA)
    for rotor in (Rotor.reflector("R", perm), Rotor.fixed("F", perm)):
        rotor.advance()
        assert rotor.offset == 0
        assert not rotor.at_notch()


def test_set_offset_wraps_and_accepts_symbols():
    rotor = _moving()
    assert rotor.set_offset(6).offset == 2
    assert rotor.set_offset(-1).offset == 3
    assert rotor.set_offset("B").offset == 1
    assert rotor.setting == "B"
    with pytest.raises(InvalidCharacter):
        rotor.set_offset("Z")


def test_advance_wraps_around():
    rotor = _moving().set_offset("D")
    rotor.advance()
    assert rotor.offset == 0


def test_at_notch_tracks_window_symbol():
    rotor = _moving(notches="CA")
    assert rotor.at_notch()
    rotor.advance()
    assert not rotor.at_notch()
    rotor.advance()
    assert rotor.at_notch()


def test_convert_shifts_by_offset():
    rotor = _moving().set_offset(1)
    # A+1=B, B->A, A-1=D
    assert rotor.convert_forward(0) == 3
    # C+1=D, D fixed, D-1=C
    assert rotor.convert_backward(2) == 2
    rotor.set_offset(0)
    assert rotor.convert_forward(0) == 2
    assert rotor.convert_backward(2) == 0


def test_backward_undoes_forward_at_every_offset():
    rotor = _moving(cycles="(ADBC)")
    for offset in range(4):
        rotor.set_offset(offset)
        for p in range(4):
            assert rotor.convert_backward(rotor.convert_forward(p)) == p


def test_ring_setting_is_a_negative_offset():
    alpha = Alphabet("ABCDEFG")
    perm = Permutation("(AGC) (BED)", alpha)
    ringed = Rotor.moving("X", perm, "")
    plain = Rotor.moving("Y", perm, "")
    for ring in range(7):
        for offset in range(7):
            ringed.set_ring(ring).set_offset(offset)
            plain.set_offset(offset - ring)
            for p in range(7):
                assert ringed.convert_forward(p) == plain.convert_forward(p)
                assert ringed.convert_backward(p) == plain.convert_backward(p)


def test_notches_are_validated():
    perm = Permutation("", ALPHA)
    with pytest.raises(InvalidConfiguration):
        Rotor.moving("X", perm, "Z")
    with pytest.raises(InvalidConfiguration):
        Rotor("Y", perm, RotorKind.FIXED, "A")
