from feedsafe.filter.tag import TagPolicy


def test_is_allowed_requires_whitelisted_tag():
    policy = TagPolicy(["p", "img"])

    assert policy.is_allowed("p", {})
    assert not policy.is_allowed("div", {})
    assert not TagPolicy().is_allowed("p", {})


def test_tracking_pixels_are_not_allowed():
    policy = TagPolicy(["img"])

    assert not policy.is_allowed("img", {"src": "x", "width": "1", "height": "1"})
    assert not policy.is_allowed("img", {"src": "x", "width": "0", "height": "1px"})
    assert policy.is_allowed("img", {"src": "x", "width": "1"})
    assert policy.is_allowed("img", {"src": "x", "width": "1", "height": "10"})


def test_open_and_close_rendering():
    policy = TagPolicy(["p", "img"])

    assert policy.open_html_tag("p") == "<p>"
    assert policy.open_html_tag("img", 'src="x"') == '<img src="x">'
    assert policy.close_html_tag("p") == "</p>"
    assert policy.close_html_tag("img") == ""


def test_remove_blacklisted_tags_with_content():
    policy = TagPolicy([], ["script", "style"])

    assert policy.remove_blacklisted_tags('a<SCRIPT type="x">b</script >c') == "ac"
    assert policy.remove_blacklisted_tags("a<style>p{}</style>b<script>c") == "ab"


def test_remove_blacklisted_tags_reaches_fixpoint():
    policy = TagPolicy([], ["script"])

    assert policy.remove_blacklisted_tags("<scr<script></script>ipt>alert(1)</script>x") == "x"


def test_remove_blacklisted_tags_leaves_other_markup():
    policy = TagPolicy([], ["script"])

    assert policy.remove_blacklisted_tags("<p>scripted</p><noscript>n</noscript>") == "<p>scripted</p><noscript>n</noscript>"


def test_remove_empty_tags_until_nothing_changes():
    policy = TagPolicy()

    assert policy.remove_empty_tags("<p><b> </b></p><p>x</p>") == "<p>x</p>"
    assert policy.remove_empty_tags("<ul><li><em></em></li></ul>") == ""


def test_remove_empty_tags_keeps_elements_with_attributes():
    policy = TagPolicy()
    html = '<iframe src="https://www.youtube.com/embed/x"></iframe>'

    assert policy.remove_empty_tags(html) == html


def test_remove_multiple_break_tags():
    policy = TagPolicy()

    assert policy.remove_multiple_break_tags("a<br><br/>\n<br >b") == "a<br>b"
    assert policy.remove_multiple_break_tags("a<br>b<br>c") == "a<br>b<br>c"
