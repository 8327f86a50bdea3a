import pytest

from pgpsession.text import ArmorBlock, ArmorError, armor, canonicalize_and_trim, unarmor


def test_canonicalize_and_trim_from_cleartext_case():
    assert canonicalize_and_trim("  Signed message\n  \n  ") == "  Signed message\r\n\r\n"


def test_canonicalize_strips_tabs_and_carriage_returns():
    assert canonicalize_and_trim("a\t \r\nb") == "a\r\nb"


def test_armor_empty_body_checksum():
    armored = armor(b"", "PGP MESSAGE")
    assert armored == "-----BEGIN PGP MESSAGE-----\n\n=twTO\n-----END PGP MESSAGE-----"


def test_armor_unarmor_round_trip_with_headers():
    data = bytes(range(256)) * 3
    armored = armor(data, "PGP MESSAGE", {"Comment": "example"})
    block = unarmor(armored)
    assert block == ArmorBlock(type="PGP MESSAGE", body=data, headers={"Comment": "example"})


def test_armor_lines_are_at_most_64_characters():
    armored = armor(bytes(500), "PGP SIGNATURE")
    assert max(len(line) for line in armored.split("\n")[2:-2]) == 64


def test_unarmor_skips_leading_text():
    armored = "some preamble\n\n" + armor(b"hello", "PGP SIGNATURE")
    block = unarmor(armored)
    assert block.type == "PGP SIGNATURE"
    assert block.body == b"hello"


def test_unarmor_checksum_mismatch():
    lines = armor(b"hello world", "PGP MESSAGE").split("\n")
    lines[-2] = "=AAAA"
    with pytest.raises(ArmorError):
        unarmor("\n".join(lines))


def test_unarmor_without_block():
    with pytest.raises(ArmorError):
        unarmor("nothing armored here")


def test_unarmor_mismatched_end():
    armored = armor(b"x", "PGP MESSAGE").replace("END PGP MESSAGE", "END PGP SIGNATURE")
    with pytest.raises(ArmorError):
        unarmor(armored)


def test_unarmor_missing_end():
    armored = armor(b"x", "PGP MESSAGE").rsplit("\n", 1)[0]
    with pytest.raises(ArmorError):
        unarmor(armored)