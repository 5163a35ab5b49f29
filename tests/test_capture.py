import pytest

from pscript.errors import PSSyntaxError
from pscript.evaluation.capture import BlockCapture
from pscript.reader.lexer import lex, EOI
from pscript.types.values import Block, Number


def _feed_all(capture, source):
    blocks = []
    for tok in lex(source):
        if tok.kind == EOI:
            break
        assert capture.wants(tok)
        block = capture.feed(tok)
        if block is not None:
            blocks.append(block)
    return blocks


def test_idle_machine_ignores_ordinary_tokens():
    capture = BlockCapture()
    tok = next(lex("add"))
    assert not capture.wants(tok)
    assert not capture.capturing


def test_simple_block():
    capture = BlockCapture()
    assert _feed_all(capture, "{ 1 1 add }") == [Block("1 1 add")]
    assert capture.depth == 0
    assert capture.buffer == []


def test_nested_block_keeps_inner_braces():
    capture = BlockCapture()
    assert _feed_all(capture, "{ 1 1 { add } exec }") == [Block("1 1 { add } exec")]


def test_texts_are_verbatim_and_space_joined():
    capture = BlockCapture()
    assert _feed_all(capture, "{/x [1 2.50] 16#ff def}") == [Block("/x [ 1 2.50 ] 16#ff def")]


def test_empty_block():
    capture = BlockCapture()
    assert _feed_all(capture, "{ }") == [Block("")]


def test_depth_tracks_nesting():
    capture = BlockCapture()
    _feed_all(capture, "{ { {")
    assert capture.depth == 3
    assert capture.buffer == ["{", "{", "{"]
    capture.reset()
    assert not capture.capturing
    assert capture.buffer == []


def test_close_while_idle_is_syntax_error():
    capture = BlockCapture()
    with pytest.raises(PSSyntaxError):
        capture.feed(next(lex("}")))


def test_block_spanning_two_inputs(interp):
    assert interp.eval("{ 1 2") == []
    assert interp.capturing
    assert interp.prompt == "..> "
    assert interp.eval("add }") == [Block("1 2 add")]
    assert not interp.capturing


def test_run_rejects_unterminated_block(interp):
    with pytest.raises(PSSyntaxError):
        interp.run("1 { 2")
    assert not interp.capturing
    assert interp.stack == [Number(1)]


def test_stray_close_in_program(interp):
    with pytest.raises(PSSyntaxError) as info:
        interp.eval("1 }")
    assert str(info.value) == "/syntaxerror in }: no open block"
    assert interp.stack == [Number(1)]
