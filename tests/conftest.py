import pytest


def fragment(speaker: str, message: str) -> str:
    """One chat entry as it appears in a saved Meet chat panel."""
    return (
        '<div class="nMcdL bj4p3b">'
        '<div class="HNucUd"><span class="NWpY1d">' + speaker + '</span>'
        '<span class="MuzmKe">10:02 AM</span></div>'
        '<div class="ygicle VbkSUe">' + message + '</div>'
        '</div>'
    )


def page(*fragments: str) -> str:
    return (
        '<html><head><title>Meet</title></head><body>'
        '<div class="z38b6">' + '\n'.join(fragments) + '</div>'
        '</body></html>'
    )


@pytest.fixture
def write_html(tmp_path):
    def _write(content: str, name: str = 'meeting.html'):
        path = tmp_path / name
        path.write_text(content, encoding='utf-8')
        return path
    return _write
