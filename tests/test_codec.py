import pytest

from tanktrouble.codec import Codec, JoinRoomStatus, MessageType, pack_message
from tanktrouble.messages import HEADER_LEN, MessageError, read_header


def _login(codec, name="tom"):
    msg = codec.empty_message(MessageType.LOGIN)
    msg["nickname"] = name
    return msg


def test_pack_login_wire_bytes():
    codec = Codec()
    data = pack_message(MessageType.LOGIN, _login(codec))
    assert data == bytes([0x10, 0x00, 0x04]) + b"tom\x00"


def test_pack_header_matches_body():
    codec = Codec()
    msg = codec.empty_message(MessageType.CONTROL)
    msg["action"] = 4
    msg["enable"] = 1
    data = pack_message(MessageType.CONTROL, msg)
    header = read_header(data)
    assert header.message_type == MessageType.CONTROL
    assert header.message_len == len(data) - HEADER_LEN == msg.size()


def test_template_field_names():
    codec = Codec()
    assert codec.empty_message(MessageType.LOGIN_RESP).names == ("nickname", "score", "user_id")
    assert codec.empty_message(MessageType.UPDATE_OBJECTS).names == ("tanks", "shells")


def test_unknown_type_gives_empty_message():
    msg = Codec().empty_message(0x7F)
    assert msg.names == ()
    assert msg.pack() == b""


def test_handle_data_dispatches():
    codec = Codec()
    received = []
    codec.register_handler(MessageType.LOGIN_RESP, lambda c, m, t: received.append((c, m, t)))
    resp = codec.empty_message(MessageType.LOGIN_RESP)
    resp["nickname"] = "tom"
    resp["score"] = 12
    resp["user_id"] = 7
    buffer = bytearray(pack_message(MessageType.LOGIN_RESP, resp))
    assert codec.handle_data("conn", buffer, 3.5) == 1
    assert buffer == bytearray()
    conn, message, when = received[0]
    assert (conn, when) == ("conn", 3.5)
    assert message == resp


def test_partial_frame_stays_in_buffer():
    codec = Codec()
    received = []
    codec.register_handler(MessageType.LOGIN, lambda c, m, t: received.append(m["nickname"]))
    data = pack_message(MessageType.LOGIN, _login(codec, "alice"))
    buffer = bytearray(data[:-2])
    assert codec.handle_data(None, buffer) == 0
    assert bytes(buffer) == data[:-2]
    buffer += data[-2:]
    assert codec.handle_data(None, buffer) == 1
    assert received == ["alice"]


def test_multiple_frames_in_order():
    codec = Codec()
    received = []
    codec.register_handler(MessageType.LOGIN, lambda c, m, t: received.append(m["nickname"]))
    buffer = bytearray()
    for name in ("a", "b", "c"):
        buffer += pack_message(MessageType.LOGIN, _login(codec, name))
    buffer += b"\x10"
    assert codec.handle_data(None, buffer) == 3
    assert received == ["a", "b", "c"]
    assert buffer == bytearray(b"\x10")


def test_unknown_type_is_skipped():
    codec = Codec()
    received = []
    codec.register_handler(MessageType.LOGIN, lambda c, m, t: received.append(m["nickname"]))
    buffer = bytearray(b"\x7f\x00\x02zz") + pack_message(MessageType.LOGIN, _login(codec, "bob"))
    assert codec.handle_data(None, buffer) == 2
    assert received == ["bob"]


def test_no_handler_still_consumes():
    codec = Codec()
    buffer = bytearray(pack_message(MessageType.LOGIN, _login(codec)))
    assert codec.handle_data(None, buffer) == 1
    assert len(buffer) == 0


def test_none_handler_is_ignored():
    codec = Codec()
    codec.register_handler(MessageType.LOGIN, None)
    buffer = bytearray(pack_message(MessageType.LOGIN, _login(codec)))
    assert codec.handle_data(None, buffer) == 1


def test_malformed_body_raises():
    codec = Codec()
    buffer = bytearray(b"\x10\x00\x02ab")
    with pytest.raises(MessageError):
        codec.handle_data(None, buffer)


def test_objects_update_round_trip():
    codec = Codec()
    msg = codec.empty_message(MessageType.UPDATE_OBJECTS)
    msg.append("tanks", {"id": 1, "center_x": 35.5, "center_y": 105.25, "angle": 270.0})
    msg.append("shells", {"x": 12.125, "y": 99.0})
    received = []
    codec.register_handler(MessageType.UPDATE_OBJECTS, lambda c, m, t: received.append(m))
    codec.handle_data(None, bytearray(pack_message(MessageType.UPDATE_OBJECTS, msg)))
    assert received[0]["tanks"] == msg["tanks"]
    assert received[0]["shells"] == [{"x": 12.125, "y": 99.0}]


def test_join_room_response_status():
    codec = Codec()
    msg = codec.empty_message(MessageType.JOIN_ROOM_RESP)
    msg["join_room_id"] = 3
    msg["operation_status"] = JoinRoomStatus.ERR_ROOM_NOT_EXIST
    received = []
    codec.register_handler(MessageType.JOIN_ROOM_RESP, lambda c, m, t: received.append(m))
    codec.handle_data(None, bytearray(pack_message(MessageType.JOIN_ROOM_RESP, msg)))
    assert JoinRoomStatus(received[0]["operation_status"]) is JoinRoomStatus.ERR_ROOM_NOT_EXIST
    assert received[0]["join_room_id"] == 3


def test_codecs_have_separate_handlers():
    first, second = Codec(), Codec()
    hits = []
    first.register_handler(MessageType.LOGIN, lambda c, m, t: hits.append("first"))
    second.handle_data(None, bytearray(pack_message(MessageType.LOGIN, _login(second))))
    first.handle_data(None, bytearray(pack_message(MessageType.LOGIN, _login(first))))
    assert hits == ["first"]