"""
Tests for drawing the box and capturing field input.

Uses FakeTerminal from conftest.py to record cursor moves and writes.
"""

import io

import pytest

from conftest import FakeTerminal, keys
from ibox.app import BoxPrompt
from ibox.capture import (
    Field,
    FieldState,
    capture_field,
    capture_fields,
    emit_output,
    transition,
)
from ibox.config import BorderPalette, BoxConfig
from ibox.errors import FieldSealedError, OutputError
from ibox.layout import BoxGeometry, build_layout
from ibox.render import render_box
from ibox.ui.keyboard import (
    KEY_BACKSPACE,
    KEY_CHAR,
    KEY_ENTER,
    KEY_ESC,
    KEY_UP,
    KeyEvent,
    OtherEvent,
)


def draw(terminal, query, origin=(0, 0), padding=8):
    layout = build_layout(query)
    width = max(len(line.display_text) for line in layout.lines) + padding
    geometry = BoxGeometry(origin=origin, interior_width=width)
    return render_box(terminal, layout, geometry, BorderPalette.default())


class TestRenderBox:
    """Tests for render_box() - rows, cursor placement and fields."""

    def test_rows_written(self, fake_terminal):
        draw(fake_terminal, ["Title", "Context", "Question?>"])
        assert fake_terminal.rows == [
            "┌─Title" + "─" * 11 + "┐",
            "│Context" + " " * 10 + "│",
            "│Question" + " " * 9 + "│",
            "└─" + "─" * 16 + "┘",
        ]

    def test_rows_positioned_one_below_another(self):
        terminal = FakeTerminal()
        draw(terminal, ["T", "a", "b"], origin=(5, 3))
        moves = [op for op in terminal.ops if op[0] == "move"]
        assert moves == [("move", 5, 3), ("move", 5, 4), ("move", 5, 5), ("move", 5, 6)]

    def test_cursor_moves_are_buffered(self, fake_terminal):
        draw(fake_terminal, ["T", "static"])
        assert not any(op[0] == "move_now" for op in fake_terminal.ops)

    def test_field_insertion_point(self):
        terminal = FakeTerminal()
        fields = draw(terminal, ["Title", "Context", "Question?>"], origin=(4, 2))
        assert len(fields) == 1
        # Row 2 of the box sits at screen row 4, text starts one column right of the border
        assert fields[0].insertion_point == (4 + 1 + len("Question"), 4)
        assert fields[0].state is FieldState.IDLE

    def test_cursor_queried_only_for_fields(self, fake_terminal):
        draw(fake_terminal, ["Title", "a", "b?>", "c"])
        assert fake_terminal.ops.count(("query",)) == 1

    def test_fields_in_declaration_order(self, fake_terminal):
        fields = draw(fake_terminal, ["T", "first?>", "static", "second?>"])
        assert [f.insertion_point[1] for f in fields] == [1, 3]

    def test_title_with_marker_is_not_a_field(self, fake_terminal):
        fields = draw(fake_terminal, ["Title?>", "x"])
        assert fields == []
        assert fake_terminal.rows[0].startswith("┌─Title─")

    def test_all_rows_same_width(self, fake_terminal):
        draw(fake_terminal, ["Title", "a much longer line", "q?>"], padding=3)
        assert len({len(row) for row in fake_terminal.rows}) == 1


class TestTransition:
    """Tests for the capturing-state transition."""

    def test_printable_keeps_capturing(self):
        assert transition(KeyEvent(KEY_CHAR, "x")) is FieldState.CAPTURING

    def test_enter_commits(self):
        assert transition(KeyEvent(KEY_ENTER)) is FieldState.COMMITTED

    @pytest.mark.parametrize("event", [
        KeyEvent(KEY_ESC),
        KeyEvent(KEY_UP),
        KeyEvent(KEY_BACKSPACE),
        OtherEvent("eof"),
    ])
    def test_anything_else_commits(self, event):
        assert transition(event) is FieldState.COMMITTED


class TestField:
    """Tests for the Field state machine."""

    def test_lifecycle(self):
        field = Field(insertion_point=(3, 1))
        field.begin()
        field.append("a")
        assert field.cursor == (4, 1)
        field.commit()
        assert field.state is FieldState.COMMITTED
        assert field.captured_text == "a\n"

    def test_cannot_type_before_begin(self):
        with pytest.raises(FieldSealedError):
            Field(insertion_point=(0, 0)).append("a")

    def test_committed_field_is_sealed(self):
        field = Field(insertion_point=(0, 0))
        field.begin()
        field.commit()
        with pytest.raises(FieldSealedError):
            field.append("a")
        with pytest.raises(FieldSealedError):
            field.commit()
        with pytest.raises(FieldSealedError):
            field.begin()


class TestCaptureField:
    """Tests for capture_field() - one field from start to commit."""

    def test_typed_text(self):
        terminal = FakeTerminal(events=keys("yes"), cursor=(0, 9))
        field = Field(insertion_point=(9, 2))
        assert capture_field(terminal, field) == "yes\n"

    def test_enter_only_gives_newline(self):
        terminal = FakeTerminal(events=keys(""))
        assert capture_field(terminal, Field(insertion_point=(1, 1))) == "\n"

    def test_cursor_follows_typing_and_is_restored(self):
        terminal = FakeTerminal(events=keys("ab"), cursor=(0, 7))
        capture_field(terminal, Field(insertion_point=(9, 2)))
        moves = [op for op in terminal.ops if op[0] == "move_now"]
        assert moves == [
            ("move_now", 9, 2),
            ("move_now", 10, 2),
            ("move_now", 11, 2),
            ("move_now", 0, 7),
        ]
        assert terminal.cursor == (0, 7)

    def test_typed_characters_echoed(self):
        terminal = FakeTerminal(events=keys("hi"))
        capture_field(terminal, Field(insertion_point=(1, 1)))
        assert [op for op in terminal.ops if op[0] == "echo"] == [("echo", "h"), ("echo", "i")]

    def test_cursor_placed_before_every_read(self):
        terminal = FakeTerminal(events=keys("xy"))
        capture_field(terminal, Field(insertion_point=(1, 1)))
        reads = [i for i, op in enumerate(terminal.ops) if op == ("read",)]
        assert len(reads) == 3
        assert all(terminal.ops[i - 1][0] == "move_now" for i in reads)

    def test_unknown_key_ends_field(self):
        events = [KeyEvent(KEY_CHAR, "a"), KeyEvent(KEY_UP), KeyEvent(KEY_CHAR, "b")]
        terminal = FakeTerminal(events=events)
        assert capture_field(terminal, Field(insertion_point=(1, 1))) == "a\n"
        # The key after the arrow is left for the next field
        assert terminal.events == [KeyEvent(KEY_CHAR, "b")]

    def test_closed_input_ends_field(self):
        terminal = FakeTerminal(events=[KeyEvent(KEY_CHAR, "a")])
        assert capture_field(terminal, Field(insertion_point=(1, 1))) == "a\n"

    def test_spaces_are_captured(self):
        terminal = FakeTerminal(events=keys("a b"))
        assert capture_field(terminal, Field(insertion_point=(1, 1))) == "a b\n"

    def test_keyboard_interrupt_propagates(self):
        class InterruptingTerminal(FakeTerminal):
            def next_key_event(self):
                raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            capture_field(InterruptingTerminal(), Field(insertion_point=(1, 1)))


class TestCaptureFields:
    """Tests for capture_fields() - fields in order."""

    def test_answers_in_field_order(self):
        terminal = FakeTerminal(events=keys("first") + keys("") + keys("third"))
        fields = [Field(insertion_point=(5, row)) for row in (1, 2, 3)]
        assert capture_fields(terminal, fields) == ["first\n", "\n", "third\n"]
        assert all(f.state is FieldState.COMMITTED for f in fields)

    def test_no_fields(self, fake_terminal):
        assert capture_fields(fake_terminal, []) == []
        assert fake_terminal.ops == []


class TestEmitOutput:
    """Tests for emit_output() - one write to stdout."""

    def test_joined_output(self):
        out = io.StringIO()
        emit_output(["yes\n", "\n", "no\n"], out)
        assert out.getvalue() == "yes\n\nno\n"

    def test_single_write(self):
        class CountingStream(io.StringIO):
            writes = 0

            def write(self, s):
                self.writes += 1
                return super().write(s)

        out = CountingStream()
        emit_output(["a\n", "b\n"], out)
        assert out.writes == 1

    def test_closed_stream(self):
        out = io.StringIO()
        out.close()
        with pytest.raises(OutputError):
            emit_output(["a\n"], out)


class TestBoxPrompt:
    """End-to-end runs against FakeTerminal."""

    def test_title_context_question(self):
        terminal = FakeTerminal(events=keys("yes"), cursor=(0, 0))
        config = BoxConfig(query=["Title", "Context", "Question?>"])
        captured = BoxPrompt(config, terminal).run()

        assert captured == ["yes\n"]
        assert terminal.rows[0] == "┌─Title" + "─" * 11 + "┐"
        assert terminal.rows[2] == "│Question" + " " * 9 + "│"
        # Typing started right after the echoed "Question"
        assert ("move_now", 9, 2) in terminal.ops

    def test_explicit_position(self):
        terminal = FakeTerminal(events=keys("ok"), cursor=(0, 20))
        config = BoxConfig(query=["T", "q?>"], position=(10, 5))
        BoxPrompt(config, terminal).run()
        assert terminal.ops[0] == ("move", 10, 5)

    def test_centered(self):
        terminal = FakeTerminal(size=(80, 24))
        config = BoxConfig(query=["Title", "Context"], center=True)
        BoxPrompt(config, terminal).run()
        width = len("Context") + 8
        assert terminal.ops[0] == ("move", 40 - width // 2 - 2, 12 - 1 - 2)

    def test_current_cursor_origin(self):
        terminal = FakeTerminal(cursor=(7, 3))
        BoxPrompt(BoxConfig(query=["Title"]), terminal).run()
        assert terminal.ops[0] == ("query",)
        assert terminal.ops[1] == ("move", 7, 3)

    def test_static_only_box_captures_nothing(self):
        terminal = FakeTerminal(events=keys("ignored"))
        assert BoxPrompt(BoxConfig(query=["Title", "Just text"]), terminal).run() == []
        assert ("read",) not in terminal.ops

    def test_fields_captured_in_one_raw_session(self):
        terminal = FakeTerminal(events=keys("a") + keys("b"))
        BoxPrompt(BoxConfig(query=["T", "one?>", "two?>"]), terminal).run()
        assert terminal.ops.count(("raw_on",)) == 1
        start = terminal.ops.index(("raw_on",))
        end = terminal.ops.index(("raw_off",))
        reads = [i for i, op in enumerate(terminal.ops) if op == ("read",)]
        assert start < reads[0] and reads[-1] < end

    def test_no_session_without_fields(self):
        terminal = FakeTerminal()
        BoxPrompt(BoxConfig(query=["T", "static"]), terminal).run()
        assert ("raw_on",) not in terminal.ops
