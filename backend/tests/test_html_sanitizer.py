from blog_api.services.html_sanitizer import sanitize_html


def test_keeps_inline_formatting():
    html = "<b>bold</b> <strong>strong</strong> <i>i</i> <em>em</em> <u>u</u><br>next"
    assert sanitize_html(html) == html


def test_strips_other_tags_but_keeps_text():
    assert sanitize_html('<p>Hello <a href="https://example.com">world</a></p>') == "Hello world"


def test_drops_scripts_and_styles_entirely():
    html = "<b>safe</b><script>alert(1)</script><style>b { color: red }</style>"
    assert sanitize_html(html) == "<b>safe</b>"


def test_strips_attributes_on_allowed_tags():
    assert sanitize_html('<b onclick="steal()" class="x">hi</b>') == "<b>hi</b>"


def test_removes_event_handler_elements():
    assert sanitize_html('<img src="x" onerror="alert(1)">') is None


def test_empty_input_returns_none():
    assert sanitize_html(None) is None
    assert sanitize_html("") is None
    assert sanitize_html("<!-- only a comment -->") is None
