from awsaiml.blocks import compact, first, optional_block, repeated_blocks, with_defaults


def test_optional_block() -> None:
    assert optional_block(None) == []
    assert optional_block({}) == []
    assert optional_block({"a": 1}) == [{"a": 1}]
    assert optional_block("s3://b/k", lambda uri: {"s3_uri": uri}) == [{"s3_uri": "s3://b/k"}]


def test_repeated_blocks() -> None:
    assert repeated_blocks(None) == []
    assert repeated_blocks([]) == []
    assert repeated_blocks(["a", "b"], lambda v: {"text": v}) == [{"text": "a"}, {"text": "b"}]


def test_with_defaults_keeps_given_values() -> None:
    defaults = {"face_match_threshold": 80.0, "auto_create": False}
    assert with_defaults(None, defaults) == defaults
    assert with_defaults({"collection_id": "c1", "face_match_threshold": None}, defaults) == {
        "collection_id": "c1",
        "face_match_threshold": 80.0,
        "auto_create": False,
    }
    assert with_defaults({"auto_create": True}, defaults)["auto_create"] is True


def test_compact_and_first() -> None:
    assert compact({"a": None, "b": 0, "c": ""}) == {"b": 0, "c": ""}
    assert first([]) is None
    assert first([{"a": 1}]) == {"a": 1}
