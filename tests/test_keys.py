# tests/test_keys.py
import pytest

from tck_core.constants import ECDSA_SECP256K1, ED25519
from tck_core.errors import KeySpecError
from tck_core.keys import (
    FOUR_KEYS_KEY_LIST, KeyList, KeyListSpec, RawKey, SingleKeySpec, ThresholdKey,
    ecdsa_secp256k1, ed25519, generate_key, key_from_wire, key_list, parse_spec,
    sign, threshold_key,
)

MESSAGE = b"file-create-body"


@pytest.mark.parametrize("spec, algorithm", [(ed25519(), ED25519), (ecdsa_secp256k1(), ECDSA_SECP256K1)])
def test_single_key_has_one_private_key(spec, algorithm):
    result = generate_key(spec)
    assert isinstance(result.key, RawKey)
    assert result.key.algorithm == algorithm
    assert not result.key.has_private
    assert len(result.private_keys) == 1
    assert result.private_keys[0].public_bytes == result.key.public_bytes
    assert result.key.is_satisfied_by(sign(result.private_keys, MESSAGE), MESSAGE)


def test_every_call_draws_fresh_material():
    a = generate_key(ed25519())
    b = generate_key(ed25519())
    assert a.key != b.key
    assert a.private_keys[0].private_bytes != b.private_keys[0].private_bytes


def test_threshold_key_tracks_all_private_keys_in_generation_order():
    spec = threshold_key(2, ed25519(), ecdsa_secp256k1(), ed25519())
    result = generate_key(spec)

    assert isinstance(result.key, ThresholdKey)
    assert result.key.threshold == 2
    assert len(result.private_keys) == 3
    assert [k.algorithm for k in result.private_keys] == [ED25519, ECDSA_SECP256K1, ED25519]
    assert [k.public_bytes for k in result.private_keys] == [k.public_bytes for k in result.key.keys]


def test_minimal_subset_satisfies_and_one_fewer_does_not():
    result = generate_key(threshold_key(2, ed25519(), ecdsa_secp256k1(), ed25519()))
    minimal = result.minimal_signers()
    assert len(minimal) == 2

    assert result.key.is_satisfied_by(sign(minimal, MESSAGE), MESSAGE)
    assert not result.key.is_satisfied_by(sign(minimal[:-1], MESSAGE), MESSAGE)


def test_any_t_members_satisfy_threshold():
    result = generate_key(threshold_key(2, ed25519(), ecdsa_secp256k1(), ed25519()))
    keys = result.private_keys
    for pair in [(keys[0], keys[1]), (keys[0], keys[2]), (keys[1], keys[2])]:
        assert result.key.is_satisfied_by(sign(pair, MESSAGE), MESSAGE)


def test_key_list_needs_every_member():
    result = generate_key(FOUR_KEYS_KEY_LIST)
    assert isinstance(result.key, KeyList)
    assert len(result.minimal_signers()) == 4
    assert result.key.is_satisfied_by(result.sign(MESSAGE), MESSAGE)
    assert not result.key.is_satisfied_by(sign(result.private_keys[1:], MESSAGE), MESSAGE)


def test_signature_from_wrong_message_does_not_count():
    result = generate_key(ed25519())
    assert not result.key.is_satisfied_by(sign(result.private_keys, b"other"), MESSAGE)


def test_nested_lists_preserve_order_at_every_level():
    spec = key_list(
        ed25519(),
        threshold_key(1, ecdsa_secp256k1(), ed25519()),
        key_list(ecdsa_secp256k1(), key_list(ed25519(), ecdsa_secp256k1())),
    )
    result = generate_key(spec)
    outer = result.key

    assert [type(k) for k in outer.keys] == [RawKey, ThresholdKey, KeyList]
    assert [k.algorithm for k in outer.keys[1].keys] == [ECDSA_SECP256K1, ED25519]
    inner = outer.keys[2]
    assert inner.keys[0].algorithm == ECDSA_SECP256K1
    assert [k.algorithm for k in inner.keys[1].keys] == [ED25519, ECDSA_SECP256K1]

    # flat private keys follow depth-first generation order
    assert [k.public_bytes for k in result.private_keys] == [k.public_bytes for k in outer.leaves()]
    assert len(result.private_keys) == 6


def test_nested_minimal_signers_cover_nested_threshold():
    spec = threshold_key(2, key_list(ed25519(), ed25519()), threshold_key(1, ed25519(), ed25519()), ed25519())
    result = generate_key(spec)
    minimal = result.minimal_signers()

    assert len(minimal) == 3
    assert result.key.is_satisfied_by(sign(minimal, MESSAGE), MESSAGE)
    assert not result.key.is_satisfied_by(sign(minimal[:2], MESSAGE), MESSAGE)


@pytest.mark.parametrize("threshold", [0, -1, 4, True])
def test_invalid_threshold_fails_at_construction(threshold):
    with pytest.raises(KeySpecError):
        threshold_key(threshold, ed25519(), ed25519(), ed25519())


def test_threshold_key_structure_checks_its_invariant():
    leaf = generate_key(ed25519()).key
    with pytest.raises(KeySpecError):
        ThresholdKey((leaf,), 2)


def test_malformed_specs_fail_loudly():
    with pytest.raises(KeySpecError):
        SingleKeySpec("rsa")
    with pytest.raises(KeySpecError):
        KeyListSpec(())
    with pytest.raises(KeySpecError):
        KeyListSpec(({"type": "ed25519PrivateKey"},))


def test_wire_form_roundtrip_keeps_structure():
    result = generate_key(threshold_key(2, ed25519(), key_list(ecdsa_secp256k1(), ed25519()), ed25519()))
    wire = result.key.to_wire()

    assert set(wire) == {"thresholdKey"}
    assert wire["thresholdKey"]["threshold"] == 2
    assert key_from_wire(wire) == result.key


def test_private_wire_form_reloads_same_key():
    for spec in (ed25519(), ecdsa_secp256k1()):
        priv = generate_key(spec).private_keys[0]
        again = RawKey.from_private_wire(priv.private_to_wire())
        assert again == priv
        assert again.private_bytes == priv.private_bytes


def test_parse_spec_reads_generate_key_params():
    spec = parse_spec({
        "type": "thresholdKey",
        "threshold": 2,
        "keys": [
            {"type": "ed25519PrivateKey"},
            {"type": "ecdsaSecp256k1PublicKey"},
            {"type": "ed25519PublicKey"},
        ],
    })
    assert spec == threshold_key(2, ed25519(), ecdsa_secp256k1(), ed25519())
    assert generate_key(spec.to_params()).key.threshold == 2


def test_parse_spec_rejects_unknown_types():
    with pytest.raises(KeySpecError):
        parse_spec({"type": "rsaPrivateKey"})
    with pytest.raises(KeySpecError):
        parse_spec({"type": "thresholdKey", "keys": [{"type": "ed25519PublicKey"}]})


def test_to_params_shape():
    assert ed25519().to_params() == {"type": "ed25519PrivateKey"}
    assert key_list(ed25519(), ecdsa_secp256k1()).to_params() == {
        "type": "keyList",
        "keys": [{"type": "ed25519PublicKey"}, {"type": "ecdsaSecp256k1PublicKey"}],
    }


def test_signing_without_private_material_is_misuse():
    public_only = generate_key(ed25519()).key
    with pytest.raises(KeySpecError):
        sign([public_only], MESSAGE)
