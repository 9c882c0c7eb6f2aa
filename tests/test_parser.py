import pytest

from feedsafe.core.errors import MalformedInputError
from feedsafe.filter.parser import parse_events


class Recorder:
    def __init__(self):
        self.events = []

    def on_open_tag(self, tag, attributes):
        self.events.append(("open", tag, attributes))

    def on_close_tag(self, tag):
        self.events.append(("close", tag))

    def on_text(self, content):
        # Whitespace may arrive as separate runs; merge adjacent text.
        if self.events and self.events[-1][0] == "text":
            self.events[-1] = ("text", self.events[-1][1] + content)
        else:
            self.events.append(("text", content))


def events_of(markup, **kwargs):
    recorder = Recorder()
    parse_events(markup, recorder, **kwargs)
    return recorder.events


def test_events_are_emitted_in_document_order():
    assert events_of('<p class="x">a<br>b</p>') == [
        ("open", "p", {"class": "x"}),
        ("text", "a"),
        ("open", "br", {}),
        ("close", "br"),
        ("text", "b"),
        ("close", "p"),
    ]


def test_tag_soup_is_balanced():
    assert events_of("<P>one<p>two <b>bold") == [
        ("open", "p", {}),
        ("text", "one"),
        ("close", "p"),
        ("open", "p", {}),
        ("text", "two "),
        ("open", "b", {}),
        ("text", "bold"),
        ("close", "b"),
        ("close", "p"),
    ]


def test_entities_are_decoded_and_comments_skipped():
    assert events_of("<!-- hidden -->a &amp; b&nbsp;c") == [("text", "a & b\xa0c")]


def test_namespaced_attributes_are_dropped():
    events = events_of('<svg><a xlink:href="javascript:x()" title="t">s</a></svg>')

    assert ("open", "a", {"title": "t"}) in events


def test_nesting_limit_raises_after_delivering_events():
    recorder = Recorder()

    with pytest.raises(MalformedInputError):
        parse_events("<b><i>x</i></b>", recorder, max_depth=1)

    assert recorder.events == [("open", "b", {})]
