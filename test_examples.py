import pytest

from lsystems.examples import ALL_EXAMPLES, Drawing


@pytest.mark.parametrize("name", sorted(ALL_EXAMPLES))
def test_examples_fit_their_canvas(name: str) -> None:
    drawing = ALL_EXAMPLES[name]()
    assert isinstance(drawing, Drawing)
    assert drawing.segments
    size = max(drawing.width, drawing.height)
    for seg in drawing.segments:
        for x, y in seg:
            assert -1e-9 <= x <= size + 1e-9
            assert -1e-9 <= y <= size + 1e-9
