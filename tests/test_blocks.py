"""
Block directive scanner tests

Tests the SCANNING/COLLECTING state machine over content units: plain
blocks, leading content before an opener, closer residuals, nesting and
unterminated blocks.
"""

import pytest

from hidemark.config import AppSettings
from hidemark.lib.blocks import BlockDirectiveScanner
from hidemark.models.nodes import ContentNode, HiddenBlockNode, NodeType, paragraph_make, text_make
from hidemark.models.resolution import ResolutionKind, ScanPhase


def P(value):
    """Paragraph unit holding one text node"""
    return paragraph_make([text_make(value)])


def feed(scanner, units):
    return [scanner.unit_feed(unit) for unit in units]


@pytest.fixture
def scanner():
    return BlockDirectiveScanner(AppSettings())


class TestStateMachine:
    """Test transitions between SCANNING and COLLECTING"""

    def test_initial_state(self, scanner):
        """Scanner starts out scanning"""
        assert scanner.state.phase is ScanPhase.SCANNING
        assert not scanner.is_collecting

    def test_plain_block(self, scanner):
        """Opener, body and closer collapse into one hidden block"""
        units = [P("Intro"), P(":::hide"), P("Secret 1"), P("Secret 2"), P(":::"), P("Outro")]
        results = feed(scanner, units)

        assert [r.kind for r in results] == [
            ResolutionKind.UNCHANGED,
            ResolutionKind.REMOVED,
            ResolutionKind.REMOVED,
            ResolutionKind.REMOVED,
            ResolutionKind.REPLACED,
            ResolutionKind.UNCHANGED,
        ]
        block = results[4].nodes[0]
        assert isinstance(block, HiddenBlockNode)
        assert block.children == [P("Secret 1"), P("Secret 2")]
        assert not scanner.is_collecting

    def test_collecting_after_opener(self, scanner):
        """Opener switches to COLLECTING"""
        scanner.unit_feed(P(":::hide"))
        assert scanner.is_collecting
        assert scanner.state.depth == 1

    def test_attributes_and_label(self, scanner):
        """Opener attributes end up on the block, label split off"""
        results = feed(scanner, [P(":::hide{level=high;text=Spoiler}"), P("x"), P(":::")])
        block = results[-1].nodes[0]
        assert block.attributes == {"level": "high"}
        assert block.label == "Spoiler"

    def test_empty_block(self, scanner):
        """Opener directly followed by closer"""
        results = feed(scanner, [P(":::hide"), P(":::")])
        assert results[-1].nodes[0].children == []

    def test_foreign_opener_ignored(self, scanner):
        """Blocks of another action are ordinary units"""
        result = scanner.unit_feed(P(":::note"))
        assert result.is_unchanged
        assert not scanner.is_collecting

    def test_bare_text_units(self, scanner):
        """Units can be text nodes instead of paragraphs"""
        results = feed(scanner, [text_make(":::hide"), text_make("s"), text_make(":::")])
        assert results[-1].nodes[0].children == [text_make("s")]

    def test_inline_directive_is_not_an_opener(self, scanner):
        """A unit holding a complete inline directive does not open a block"""
        assert scanner.unit_feed(P(":::hide secret:::")).is_unchanged

    def test_state_reset(self, scanner):
        """Reset drops an in-progress block"""
        feed(scanner, [P(":::hide"), P("x")])
        scanner.state_reset()
        assert not scanner.is_collecting
        assert scanner.state.accumulator == []


class TestOpenerAndCloser:
    """Test openers and closers sharing a unit with other content"""

    def test_leading_content_survives(self, scanner):
        """Lines before the opener stay as their own unit"""
        result = scanner.unit_feed(P("Intro line\n:::hide"))
        assert result.kind is ResolutionKind.REPLACED
        assert result.nodes == [P("Intro line")]
        assert scanner.is_collecting

    def test_leading_siblings_survive(self, scanner):
        """Inline siblings before the marker text stay too"""
        unit = paragraph_make([
            ContentNode(type="emphasis", children=[text_make("note")]),
            text_make(" first\n:::hide"),
        ])
        result = scanner.unit_feed(unit)
        leading = result.nodes[0]
        assert leading.type == NodeType.PARAGRAPH
        assert leading.children[0].type == "emphasis"
        assert leading.children[1].value == " first"

    def test_closer_residual_kept(self, scanner):
        """Content before the closer becomes the last child"""
        results = feed(scanner, [P(":::hide"), P("a"), P("last secret\n:::")])
        assert results[-1].nodes[0].children == [P("a"), P("last secret")]

    def test_closer_inside_container(self, scanner):
        """Closer at the end of a nested container is found"""
        quote = ContentNode(type="blockquote", children=[P("quoted"), P("tail\n:::")])
        results = feed(scanner, [P(":::hide"), quote])

        residual = results[-1].nodes[0].children[0]
        assert residual.type == "blockquote"
        assert residual.children == [P("quoted"), P("tail")]
        # captured unit is copied, never modified
        assert quote.children[1].children[0].value == "tail\n:::"


class TestNesting:
    """Test nested block openers"""

    def test_outer_block_ends_at_own_closer(self, scanner):
        """Inner opener and closer stay inside the outer block"""
        units = [P(":::hide"), P("a"), P(":::hide"), P("b"), P(":::"), P("c"), P(":::")]
        results = feed(scanner, units)

        assert [r.kind for r in results[:-1]] == [ResolutionKind.REMOVED] * 6
        block = results[-1].nodes[0]
        assert block.children == [P("a"), P(":::hide"), P("b"), P(":::"), P("c")]

    def test_foreign_opener_nests_too(self, scanner):
        """Any opener-shaped unit opens a level while collecting"""
        units = [P(":::hide"), P(":::note"), P("n"), P(":::"), P(":::")]
        results = feed(scanner, units)
        assert len(results[-1].nodes[0].children) == 3


class TestScanFinish:
    """Test end of sequence handling"""

    def test_nothing_pending(self, scanner):
        """No block in progress gives nothing back"""
        scanner.unit_feed(P("text"))
        assert scanner.scan_finish() == []

    def test_unterminated_restored(self, scanner):
        """Marker and collected units come back in order"""
        body = P("secret")
        feed(scanner, [P("Intro\n:::hide{a=1}"), body])

        restored = scanner.scan_finish()
        assert restored == [P(":::hide{a=1}"), body]
        assert restored[1] is body
        assert not scanner.is_collecting
