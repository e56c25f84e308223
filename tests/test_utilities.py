import pytest

from alphabet_and_permutation import Alphabet
from errors import InvalidCharacter, InvalidConfiguration, MalformedCycle
from rotor_and_reflector import RotorKind
from utilities import (
    Settings,
    check_disjoint,
    format_groups,
    is_settings_line,
    load_config,
    parse_counts,
    parse_rotor,
    parse_settings,
)

SMALL_CONF = """
ABCDEF
3 2

R R (AB) (CD)
   (EF)
N N (ACE)
X MA (ABC) (DE)
Y MBD (AF)
"""


def test_load_default_config(default_config):
    assert default_config.alphabet.chars == "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    assert (default_config.num_rotors, default_config.num_pawls) == (4, 3)
    assert default_config.rotor_names() == ["I", "II", "III", "IV", "V", "B", "C"]
    by_name = {r.name: r for r in default_config.rotors}
    assert by_name["III"].notches == frozenset("V")
    # the continuation line finished reflector B
    assert by_name["B"].permutation.derangement()
    assert by_name["B"].permutation.permute("T") == "Z"


def test_load_config_from_lines():
    config = load_config(SMALL_CONF.splitlines())
    kinds = {r.name: r.kind for r in config.rotors}
    assert kinds == {
        "R": RotorKind.REFLECTOR,
        "N": RotorKind.FIXED,
        "X": RotorKind.MOVING,
        "Y": RotorKind.MOVING,
    }
    refl = config.rotors[0].permutation
    assert refl.cycles == ("AB", "CD", "EF")
    assert config.rotors[3].notches == frozenset("BD")


def test_build_machine_copies_rotors():
    config = load_config(SMALL_CONF.splitlines())
    first, second = config.build_machine(), config.build_machine()
    first.setup(["R", "X", "Y"], "CC")
    second.setup(["R", "X", "Y"], "AA")
    assert first.window() == "CC"
    assert config.rotors[2].offset == 0


@pytest.mark.parametrize(
    "text",
    [
        "AB CD\n3 2\n",                        # whitespace in alphabet
        "AB(C\n3 2\n",                         # parenthesis in alphabet
        "ABCA\n3 2\n",                         # duplicate symbol
        "ABCD\nthree two\n",                   # counts line
        "ABCD\n3 3\n",                         # pawls >= rotors
        "ABCD\n3 0\n",                         # no pawls
        "ABCD\n3 2\nX Q (AB)\n",               # unknown kind
        "ABCD\n3 2\nX M (AB) junk\n",          # trailing text
        "ABCD\n3 2\n(AB)\n",                   # continuation with nothing to extend
        "ABCD\n3 2\nX N (AB)\nX N (CD)\n",     # duplicate name
        "ABCD\n3 2\nX NA (AB)\n",              # notch on a fixed rotor
        "ABCD\n",                              # truncated
    ],
)
def test_bad_configurations(text):
    with pytest.raises(InvalidConfiguration):
        load_config(text.splitlines())


def test_bad_cycle_symbol_in_configuration():
    with pytest.raises(MalformedCycle):
        load_config("ABCD\n3 2\nX MA (AZ)\n".splitlines())


@pytest.mark.parametrize(
    "text",
    [
        "ABCD\n3 2\nX N (AB) (AC)\n",          # same line
        "ABCD\n3 2\nX N (AB)\n  (CA)\n",      # continuation line
    ],
)
def test_overlapping_rotor_cycles_are_rejected(text):
    with pytest.raises(MalformedCycle):
        load_config(text.splitlines())


def test_overlapping_plugboard_cycles_are_rejected():
    with pytest.raises(MalformedCycle):
        parse_settings("* B I II III AAA (AB) (AC)", 4)
    with pytest.raises(MalformedCycle):
        check_disjoint("(CD)", "ABC")
    check_disjoint("(AB) (CD)", "EF")


def test_parse_counts_and_rotor():
    assert parse_counts(" 5  3 ") == (5, 3)
    rotor = parse_rotor("Beta N (ALB) (HIX)", Alphabet())
    assert rotor.name == "Beta"
    assert rotor.kind is RotorKind.FIXED
    assert rotor.permutation.permute("B") == "A"


def test_parse_settings_full_line():
    s = parse_settings("* B Beta III IV I AXLE (YF) (ZH)", 5)
    assert s == Settings(("B", "Beta", "III", "IV", "I"), "AXLE", None, "(YF) (ZH)")
    assert str(s) == "* B Beta III IV I AXLE (YF) (ZH)"


def test_parse_settings_with_rings_and_no_plugs():
    s = parse_settings("  *   B I II III  ABC   XYZ", 4)
    assert s.rotors == ("B", "I", "II", "III")
    assert s.offsets == "ABC"
    assert s.rings == "XYZ"
    assert s.plugboard == ""


@pytest.mark.parametrize(
    "line",
    [
        "B I II III AAA",                 # no marker
        "* B I II AAA",                   # too few names
        "* B I II III IV AAA XYZ",        # too many words
        "*",
    ],
)
def test_bad_settings_lines(line):
    with pytest.raises(InvalidConfiguration):
        parse_settings(line, 4)


def test_settings_apply_to_machine(enigma):
    parse_settings("* B I II III AAA BBB (AB)", 4).apply(enigma)
    assert enigma.window() == "AAA"
    assert [r.ring for r in enigma.rotors[1:]] == [1, 1, 1]
    assert enigma.plugboard.permute("A") == "B"


def test_settings_errors_surface_from_machine(enigma):
    with pytest.raises(InvalidConfiguration):
        parse_settings("* B I II III AAAA", 4).apply(enigma)
    with pytest.raises(InvalidCharacter):
        parse_settings("* B I II III A-A", 4).apply(enigma)
    with pytest.raises(MalformedCycle):
        parse_settings("* B I II III AAA (AB", 4).apply(enigma)


def test_is_settings_line():
    assert is_settings_line("* B I II III AAA")
    assert is_settings_line("   *B")
    assert not is_settings_line("HELLO *")


@pytest.mark.parametrize(
    "raw, grouped",
    [
        ("QVPQSOKOILPUBKJZPISFXDW", "QVPQS OKOIL PUBKJ ZPISF XDW"),
        ("AB CDE FGH", "ABCDE FGH"),
        ("ABCDE", "ABCDE"),
        ("", ""),
    ],
)
def test_format_groups(raw, grouped):
    assert format_groups(raw) == grouped


def test_format_groups_custom_block():
    assert format_groups("ABCDEFG", 3) == "ABC DEF G"
