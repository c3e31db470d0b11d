"""Tests for the SignaturePackage value type and its byte layout."""

import dataclasses

import pytest

from sigpackage.exceptions import InvalidPackageError
from sigpackage.package import PACKAGE_LENGTH, SignaturePackage


def make_package(**overrides) -> SignaturePackage:
    fields = {
        "verifier_signature": bytes(range(64)),
        "recovery_id": 1,
        "public_key": b"\x04" + bytes(range(100, 164)),
        "data": b"\xaa" * 32,
    }
    fields.update(overrides)
    return SignaturePackage(**fields)


class TestConstruction:
    """Test field validation."""

    def test_valid_package(self):
        package = make_package()
        assert package.recovery_id == 1
        assert len(package.public_key) == 65

    @pytest.mark.parametrize(
        "field,value",
        [
            ("verifier_signature", b"\x00" * 63),
            ("verifier_signature", b"\x00" * 65),
            ("public_key", b"\x04" * 64),
            ("public_key", b"\x04" * 33),
            ("data", b"\x00" * 31),
            ("data", b""),
        ],
    )
    def test_wrong_lengths_rejected(self, field, value):
        with pytest.raises(InvalidPackageError):
            make_package(**{field: value})

    def test_non_bytes_rejected(self):
        with pytest.raises(InvalidPackageError):
            make_package(data="a" * 32)

    def test_recovery_id_must_fit_in_a_byte(self):
        with pytest.raises(InvalidPackageError):
            make_package(recovery_id=256)
        with pytest.raises(InvalidPackageError):
            make_package(recovery_id=-1)

    def test_recovery_id_above_three_is_representable(self):
        """Out-of-domain ids are rejected by the verifier, not the data model."""
        assert make_package(recovery_id=4).recovery_id == 4

    def test_bytearray_normalised_to_bytes(self):
        package = make_package(data=bytearray(b"\x01" * 32))
        assert type(package.data) is bytes

    def test_immutable(self):
        package = make_package()
        with pytest.raises(dataclasses.FrozenInstanceError):
            package.recovery_id = 0

    def test_replace_returns_new_package(self):
        package = make_package()
        changed = package.replace(recovery_id=0)
        assert changed.recovery_id == 0
        assert package.recovery_id == 1

    def test_replace_validates(self):
        with pytest.raises(InvalidPackageError):
            make_package().replace(data=b"short")


class TestSerialization:
    """Test the canonical byte layout."""

    def test_length(self):
        assert len(make_package().to_bytes()) == PACKAGE_LENGTH == 162

    def test_field_order(self):
        package = make_package()
        encoded = package.to_bytes()

        assert encoded[:64] == package.verifier_signature
        assert encoded[64] == package.recovery_id
        assert encoded[65:130] == package.public_key
        assert encoded[130:] == package.data

    def test_from_bytes_restores_package(self):
        package = make_package(recovery_id=3)
        assert SignaturePackage.from_bytes(package.to_bytes()) == package

    def test_from_bytes_rejects_short_input(self):
        with pytest.raises(InvalidPackageError):
            SignaturePackage.from_bytes(make_package().to_bytes()[:-1])

    def test_from_bytes_rejects_trailing_bytes(self):
        with pytest.raises(InvalidPackageError):
            SignaturePackage.from_bytes(make_package().to_bytes() + b"\x00")

    def test_from_bytes_rejects_non_bytes(self):
        with pytest.raises(InvalidPackageError):
            SignaturePackage.from_bytes("not bytes")
