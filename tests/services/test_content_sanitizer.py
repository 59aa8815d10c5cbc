from bs4 import BeautifulSoup

from webgrabber.services.content_sanitizer import ContentSanitizer


def _sanitize(html):
    soup = BeautifulSoup(html, "html.parser")
    ContentSanitizer().sanitize(soup)
    return soup


def test_removes_script_and_style_elements():
    soup = _sanitize("<div><script>alert(1)</script><style>p{}</style><p>keep</p></div>")
    assert soup.find("script") is None
    assert soup.find("style") is None
    assert soup.get_text() == "keep"


def test_removes_event_handler_attributes_case_insensitively():
    soup = _sanitize('<p onclick="x()" ONMOUSEOVER="y()" class="c">t</p>')
    p = soup.find("p")
    assert p.attrs == {"class": ["c"]}


def test_removes_javascript_urls_but_keeps_element():
    soup = _sanitize('<a href="  JavaScript:void(0)">label</a><img src="javascript:x">')
    a = soup.find("a")
    assert "href" not in a.attrs
    assert a.get_text() == "label"
    assert "src" not in soup.find("img").attrs


def test_leaves_regular_links_alone():
    soup = _sanitize('<a href="/docs" title="on top">d</a>')
    assert soup.find("a")["href"] == "/docs"
    assert soup.find("a")["title"] == "on top"
